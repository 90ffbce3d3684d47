"""Flatten a book's chapter/topic tree into ordered, addressable pages."""

from __future__ import annotations

from dataclasses import dataclass

from docsitemap.books.models import Book, ChapterRecord, FlatPage, FlattenedBook, LeafTopic, ParentTopic
from docsitemap.books.normalize import normalize_path


@dataclass(slots=True)
class MalformedTreeError(Exception):
    """Domain error for tree nodes that cannot become an addressable page."""

    book: str
    location: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (book={self.book}, location={self.location})"


def strip_extension(file_name: str) -> str:
    """Drop the last ``.suffix`` of a file name; names without one are kept."""

    stem, dot, _ = file_name.rpartition(".")
    return stem if dot and stem else file_name


def _segment(book: Book, location: str, raw: str, kind: str) -> str:
    segment = normalize_path(raw)
    if not segment:
        raise MalformedTreeError(
            book=book.repo_path,
            location=location,
            message=f"{kind} {raw!r} normalizes to an empty segment",
        )
    return segment


def flatten_book(book: Book) -> FlattenedBook:
    chapters: list[ChapterRecord] = []
    pages: list[FlatPage] = []
    seen: dict[str, str] = {}

    for chapter_index, chapter in enumerate(book.chapters):
        chapter_location = f"chapters[{chapter_index}]"
        chapter_path = f"{book.repo_path}/{_segment(book, chapter_location, chapter.dir, 'Chapter dir')}"
        chapters.append(ChapterRecord(path=chapter_path, name=chapter.name))

        # (node, parent path, location); reversed so children pop in listed order
        stack: list[tuple[object, str, str]] = [
            (node, "", f"{chapter_location}.topics[{index}]")
            for index, node in reversed(list(enumerate(chapter.topics)))
        ]
        while stack:
            node, parent_path, location = stack.pop()
            if isinstance(node, ParentTopic):
                segment = _segment(book, location, node.dir, "Topic group dir")
                nested_path = f"{parent_path}/{segment}" if parent_path else segment
                stack.extend(
                    (child, nested_path, f"{location}.topics[{index}]")
                    for index, child in reversed(list(enumerate(node.topics)))
                )
                continue

            if isinstance(node, LeafTopic):
                topic_key = _segment(book, location, strip_extension(node.file), "Topic file")
                path = f"{chapter_path}/{parent_path}/{topic_key}" if parent_path else f"{chapter_path}/{topic_key}"
                if path in seen:
                    raise MalformedTreeError(
                        book=book.repo_path,
                        location=location,
                        message=f"Duplicate page path {path} (first defined at {seen[path]})",
                    )
                seen[path] = location
                pages.append(FlatPage(chapter=chapter_path, path=path, name=node.name))
                continue

            raise MalformedTreeError(
                book=book.repo_path,
                location=location,
                message=f"Unsupported tree node type: {type(node).__name__}",
            )

    return FlattenedBook(chapters=tuple(chapters), pages=tuple(pages))


def flatten(book: Book) -> tuple[FlatPage, ...]:
    """Return the book's leaf pages in pre-order traversal order."""

    return flatten_book(book).pages
