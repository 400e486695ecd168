"""Parse and normalize generative model responses into books."""
import json
import logging
import re
from typing import Dict, Any, List

from bookrec.errors import ResponseParseError
from bookrec.models import (
    Book,
    DEFAULT_AUTHOR,
    DEFAULT_DESCRIPTION,
    DEFAULT_GENRE,
    DEFAULT_TITLE,
)

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"^\s*```[a-zA-Z]*\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)


def _text(value: Any, default: str) -> str:
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def parse_rating(value: Any) -> float:
    """
    Coerce a rating to float.

    Accepts numbers and numeric strings; anything else becomes 0.0.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return 0.0


def parse_book(item: Dict[str, Any]) -> Book:
    """
    Build a Book from one JSON object.

    Missing or null fields fall back to their defaults, so this never fails
    for a dict input.

    Args:
        item: Book-like object from the model output

    Returns:
        Book object
    """
    return Book(
        title=_text(item.get("title"), DEFAULT_TITLE),
        author=_text(item.get("author"), DEFAULT_AUTHOR),
        genre=_text(item.get("genre"), DEFAULT_GENRE),
        rating=parse_rating(item.get("rating")),
        description=_text(item.get("description"), DEFAULT_DESCRIPTION),
        image_url=_text(item.get("imageUrl"), ""),
    )


def extract_candidate_text(response_json: Any) -> str:
    """
    Pull candidates[0].content.parts[0].text out of the response envelope.

    Raises:
        ResponseParseError: if any step of the path is missing
    """
    try:
        text = response_json["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise ResponseParseError(f"Unexpected response envelope: {e!r}") from e

    if not isinstance(text, str):
        raise ResponseParseError("Candidate text is not a string")
    return text


def strip_code_fence(text: str) -> str:
    """Remove a surrounding Markdown code fence, if present."""
    match = _CODE_FENCE.match(text)
    return match.group(1) if match else text.strip()


def parse_books_text(text: str) -> List[Book]:
    """
    Parse candidate text of the form {"books": [...]} into books.

    Non-object entries in the list are skipped and repeated books
    (same title and author) are dropped.

    Raises:
        ResponseParseError: if the text is not JSON or has no books list
    """
    try:
        payload = json.loads(strip_code_fence(text))
    except ValueError as e:
        raise ResponseParseError(f"Candidate text is not valid JSON: {e}") from e

    if not isinstance(payload, dict) or not isinstance(payload.get("books"), list):
        raise ResponseParseError("Candidate JSON has no 'books' list")

    books = []
    for item in payload["books"]:
        if not isinstance(item, dict):
            logger.warning(f"Skipping non-object book entry: {item!r}")
            continue
        books.append(parse_book(item))

    return deduplicate_books(books)


def deduplicate_books(books: List[Book]) -> List[Book]:
    """
    Remove repeated books, keeping the first occurrence.

    Args:
        books: List of Book objects

    Returns:
        Deduplicated list of books
    """
    seen = set()
    unique_books = []

    for book in books:
        if book not in seen:
            seen.add(book)
            unique_books.append(book)

    return unique_books
