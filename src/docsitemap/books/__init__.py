"""Book tree models, loading and flattening."""

from .flatten import MalformedTreeError, flatten, flatten_book
from .loader import build_book, discover_books, load_book_manifest
from .models import Book, Chapter, ChapterRecord, EnrichedPage, FlatPage, FlattenedBook, LeafTopic, ParentTopic
from .normalize import normalize_path

__all__ = [
    "Book",
    "Chapter",
    "ChapterRecord",
    "EnrichedPage",
    "FlatPage",
    "FlattenedBook",
    "LeafTopic",
    "MalformedTreeError",
    "ParentTopic",
    "build_book",
    "discover_books",
    "flatten",
    "flatten_book",
    "load_book_manifest",
    "normalize_path",
]
