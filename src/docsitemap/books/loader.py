"""Build typed book trees from ``book.yml`` manifests and raw mappings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

from docsitemap.books.flatten import MalformedTreeError
from docsitemap.books.models import Book, Chapter, LeafTopic, ParentTopic, TreeNode


MANIFEST_NAME = "book.yml"

logger = logging.getLogger(__name__)


def _optional_str(value: object) -> str:
    return "" if value is None else str(value)


def _build_node(raw: object, *, book: str, location: str) -> TreeNode:
    if not isinstance(raw, Mapping):
        raise MalformedTreeError(book=book, location=location, message="Topic entry is not a mapping")

    children = raw.get("topics")
    if children is not None:
        directory = raw.get("dir")
        if not isinstance(children, list) or not isinstance(directory, str):
            raise MalformedTreeError(
                book=book,
                location=location,
                message="Topic group requires a 'dir' string and a 'topics' list",
            )
        return ParentTopic(
            dir=directory,
            name=_optional_str(raw.get("name")),
            topics=_build_nodes(children, book=book, location=location),
        )

    file_name = raw.get("file")
    if isinstance(file_name, str) and file_name.strip():
        return LeafTopic(file=file_name, name=_optional_str(raw.get("name")))

    raise MalformedTreeError(
        book=book,
        location=location,
        message="Topic is neither a group with 'topics' nor a leaf with 'file'",
    )


def _build_nodes(raw_nodes: Sequence[object], *, book: str, location: str) -> tuple[TreeNode, ...]:
    return tuple(
        _build_node(raw, book=book, location=f"{location}.topics[{index}]")
        for index, raw in enumerate(raw_nodes)
    )


def build_book(
    *,
    repo_path: str,
    title: str,
    chapters: Sequence[object],
    source_dir: str | None = None,
) -> Book:
    """Validate raw chapter mappings and return an immutable book tree."""

    built: list[Chapter] = []
    for index, raw in enumerate(chapters):
        location = f"chapters[{index}]"
        if not isinstance(raw, Mapping):
            raise MalformedTreeError(book=repo_path, location=location, message="Chapter entry is not a mapping")

        directory = raw.get("dir")
        topics = raw.get("topics", [])
        if not isinstance(directory, str):
            raise MalformedTreeError(book=repo_path, location=location, message="Chapter requires a 'dir' string")
        if not isinstance(topics, list):
            raise MalformedTreeError(book=repo_path, location=location, message="Chapter 'topics' must be a list")

        built.append(
            Chapter(
                dir=directory,
                name=_optional_str(raw.get("name")),
                topics=_build_nodes(topics, book=repo_path, location=location),
            )
        )

    return Book(
        repo_path=repo_path,
        title=title,
        chapters=tuple(built),
        source_dir=repo_path if source_dir is None else source_dir,
    )


def _repo_relative(path: Path, repo_root: Path) -> str:
    try:
        relative = path.resolve().relative_to(repo_root.resolve())
    except ValueError as exc:
        raise MalformedTreeError(
            book=str(path),
            location="manifest",
            message=f"Manifest is outside the repository root {repo_root}",
        ) from exc
    return "/" + relative.as_posix()


def load_book_manifest(path: str | Path, *, repo_root: str | Path) -> Book:
    """Load a multi-document ``book.yml`` into a book rooted at its directory."""

    manifest = Path(path)
    repo_path = _repo_relative(manifest.parent, Path(repo_root))

    try:
        documents: list[Any] = list(yaml.safe_load_all(manifest.read_text(encoding="utf-8")))
    except (OSError, yaml.YAMLError) as exc:
        raise MalformedTreeError(book=repo_path, location="manifest", message=f"Failed to read manifest: {exc}") from exc

    book_doc: Mapping[str, Any] | None = None
    chapters: list[Any] = []
    for document in documents:
        if not isinstance(document, Mapping):
            continue
        kind = document.get("kind")
        if kind == "book" and book_doc is None:
            book_doc = document
        elif kind == "chapter":
            chapters.append(document)

    if book_doc is None:
        raise MalformedTreeError(book=repo_path, location="manifest", message="Manifest has no 'kind: book' document")

    return build_book(
        repo_path=repo_path,
        title=_optional_str(book_doc.get("title")),
        chapters=chapters,
    )


def discover_books(docs_dir: str | Path, *, repo_root: str | Path) -> list[Book]:
    """Load every manifest below ``docs_dir`` in sorted path order."""

    root = Path(docs_dir)
    if not root.is_dir():
        raise ValueError(f"Docs directory does not exist or is not a directory: {root}")

    manifests = sorted(root.rglob(MANIFEST_NAME))
    logger.info("Found %s book manifests under %s", len(manifests), root)
    return [load_book_manifest(manifest, repo_root=repo_root) for manifest in manifests]
