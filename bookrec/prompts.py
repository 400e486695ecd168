"""Prompt text and request body for the generative model."""
from typing import Dict, Any

BOOK_FIELDS = "title, author, genre, rating, description, and imageUrl"

GENERATION_CONFIG = {
    "temperature": 0.7,
    "maxOutputTokens": 256,
    "topP": 0.8,
    "topK": 40,
}


def search_prompt(query: str) -> str:
    """Prompt asking for books matching free-text query."""
    return (
        f"Search books by: {query}. Return results in JSON format with a 'books' key "
        f"containing a list of books with {BOOK_FIELDS}."
    )


def random_prompt() -> str:
    """Prompt asking for a handful of popular books."""
    return (
        "Recommend 5 random popular books. Return results in JSON format with a 'books' key "
        f"containing books with {BOOK_FIELDS}."
    )


def build_request_body(prompt: str) -> Dict[str, Any]:
    """Wrap a prompt in the generateContent request body."""
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": dict(GENERATION_CONFIG),
    }
