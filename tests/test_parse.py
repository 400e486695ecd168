"""Tests for parsing functions."""
import json

import pytest

from bookrec.errors import ResponseParseError
from bookrec.parse import (
    deduplicate_books,
    extract_candidate_text,
    parse_book,
    parse_books_text,
    parse_rating,
    strip_code_fence,
)
from bookrec.models import Book


def envelope(text):
    """Wrap candidate text in a generateContent response."""
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def test_parse_book_complete():
    """Test parsing a book with all fields present."""
    item = {
        "title": "Dune",
        "author": "Frank Herbert",
        "genre": "Science Fiction",
        "rating": 4.3,
        "description": "Spice and sandworms.",
        "imageUrl": "http://example.com/dune.jpg"
    }

    book = parse_book(item)

    assert book.title == "Dune"
    assert book.author == "Frank Herbert"
    assert book.genre == "Science Fiction"
    assert book.rating == 4.3
    assert book.description == "Spice and sandworms."
    assert book.image_url == "http://example.com/dune.jpg"


def test_parse_book_empty_object_uses_defaults():
    """Every missing field falls back to its default."""
    book = parse_book({})

    assert book.title == "No Title"
    assert book.author == "Unknown Author"
    assert book.genre == "Unknown Genre"
    assert book.rating == 0.0
    assert book.description == "No description available."
    assert book.image_url == ""


@pytest.mark.parametrize("missing", ["title", "author", "genre", "rating", "description", "imageUrl"])
def test_parse_book_single_missing_field(missing):
    """Dropping any one field only affects that field."""
    item = {
        "title": "T",
        "author": "A",
        "genre": "G",
        "rating": 3,
        "description": "D",
        "imageUrl": "U",
    }
    del item[missing]

    book = parse_book(item).to_dict()

    defaults = {
        "title": "No Title",
        "author": "Unknown Author",
        "genre": "Unknown Genre",
        "rating": 0.0,
        "description": "No description available.",
        "imageUrl": "",
    }
    assert book[missing] == defaults[missing]
    for key, value in item.items():
        assert book[key] == value


def test_parse_book_null_fields_use_defaults():
    """JSON nulls count as missing."""
    book = parse_book({"title": None, "author": None, "rating": None, "imageUrl": None})

    assert book.title == "No Title"
    assert book.author == "Unknown Author"
    assert book.rating == 0.0
    assert book.image_url == ""


@pytest.mark.parametrize("raw, expected", [
    (4.5, 4.5),
    (4, 4.0),
    ("3.75", 3.75),
    (" 2 ", 2.0),
    ("five stars", 0.0),
    ([4], 0.0),
    (True, 0.0),
])
def test_parse_rating(raw, expected):
    assert parse_rating(raw) == expected


def test_extract_candidate_text():
    assert extract_candidate_text(envelope("hello")) == "hello"


@pytest.mark.parametrize("response", [
    {},
    {"candidates": []},
    {"candidates": [{}]},
    {"candidates": [{"content": {"parts": []}}]},
    {"candidates": [{"content": {"parts": [{"text": 7}]}}]},
    [],
    None,
])
def test_extract_candidate_text_malformed(response):
    """Malformed envelopes raise a parse error, not KeyError/IndexError."""
    with pytest.raises(ResponseParseError):
        extract_candidate_text(response)


def test_parse_full_response():
    """Test parsing complete API response."""
    text = json.dumps({"books": [
        {"title": "T", "author": "A", "genre": "G", "rating": 4.5, "description": "D", "imageUrl": ""}
    ]})

    books = parse_books_text(extract_candidate_text(envelope(text)))

    assert len(books) == 1
    assert books[0].title == "T"
    assert books[0].author == "A"
    assert books[0].rating == 4.5


def test_parse_books_text_keeps_order():
    text = json.dumps({"books": [{"title": "First"}, {"title": "Second"}, {"title": "Third"}]})

    books = parse_books_text(text)

    assert [b.title for b in books] == ["First", "Second", "Third"]


def test_parse_books_text_code_fence():
    """Models often wrap JSON in a Markdown fence."""
    text = '```json\n{"books": [{"title": "Fenced", "author": "X"}]}\n```'

    books = parse_books_text(text)

    assert books == [Book(title="Fenced", author="X")]


def test_strip_code_fence_plain_text():
    assert strip_code_fence('  {"books": []}\n') == '{"books": []}'


def test_parse_books_text_skips_non_objects():
    books = parse_books_text(json.dumps({"books": [{"title": "Ok"}, "junk", 3]}))

    assert [b.title for b in books] == ["Ok"]


@pytest.mark.parametrize("text", [
    "Here are some books you might like!",
    "[]",
    '{"results": []}',
    '{"books": "none"}',
])
def test_parse_books_text_bad_shape(text):
    with pytest.raises(ResponseParseError):
        parse_books_text(text)


def test_deduplicate_books():
    """Test deduplication by title and author."""
    books = [
        Book("Book A", "Author 1", rating=4.0),
        Book("Book B", "Author 1"),
        Book("Book A", "Author 1", rating=2.0),
    ]

    unique = deduplicate_books(books)

    assert len(unique) == 2
    assert unique[0].title == "Book A"
    assert unique[0].rating == 4.0
    assert unique[1].title == "Book B"


def test_parse_books_text_drops_repeated_titles():
    """The model sometimes lists the same book twice."""
    text = json.dumps({"books": [
        {"title": "Dune", "author": "Frank Herbert", "rating": 4.3},
        {"title": "Emma", "author": "Jane Austen"},
        {"title": "Dune", "author": "Frank Herbert", "rating": 3.0},
    ]})

    books = parse_books_text(text)

    assert [b.title for b in books] == ["Dune", "Emma"]
    assert books[0].rating == 4.3
