"""Data models for book recommendations."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional


DEFAULT_TITLE = "No Title"
DEFAULT_AUTHOR = "Unknown Author"
DEFAULT_GENRE = "Unknown Genre"
DEFAULT_DESCRIPTION = "No description available."


@dataclass(frozen=True)
class Book:
    """A single recommended title.

    Identity is title + author; the remaining fields do not take part in
    equality or hashing, so favorites are keyed on title and author only.
    """
    title: str = DEFAULT_TITLE
    author: str = DEFAULT_AUTHOR
    genre: str = field(default=DEFAULT_GENRE, compare=False)
    rating: float = field(default=0.0, compare=False)
    description: str = field(default=DEFAULT_DESCRIPTION, compare=False)
    image_url: str = field(default="", compare=False)

    @property
    def rating_str(self) -> str:
        """Format rating with one decimal place."""
        return f"{self.rating:.1f}"

    def to_dict(self) -> Dict[str, object]:
        """Serialize using the wire field names."""
        return {
            "title": self.title,
            "author": self.author,
            "genre": self.genre,
            "rating": self.rating,
            "description": self.description,
            "imageUrl": self.image_url,
        }


@dataclass
class ViewState:
    """Screen state owned by the controller."""
    displayed_books: List[Book] = field(default_factory=list)
    favorite_books: List[Book] = field(default_factory=list)
    is_loading: bool = False
    current_query: str = ""
    error_message: Optional[str] = None
