"""Canonical book tree and page records shared by flattening and enrichment."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Union


@dataclass(frozen=True, slots=True)
class LeafTopic:
    """A topic that maps to one content file and one sitemap page."""

    file: str
    name: str = ""


@dataclass(frozen=True, slots=True)
class ParentTopic:
    """A topic group that only contributes a directory segment to its children."""

    dir: str
    name: str = ""
    topics: tuple["TreeNode", ...] = ()


TreeNode = Union[ParentTopic, LeafTopic]


@dataclass(frozen=True, slots=True)
class Chapter:
    dir: str
    name: str = ""
    topics: tuple[TreeNode, ...] = ()


@dataclass(frozen=True, slots=True)
class Book:
    """A documentation book rooted at a repository-relative path."""

    repo_path: str
    title: str
    chapters: tuple[Chapter, ...] = ()
    source_dir: str = ""


@dataclass(frozen=True, slots=True)
class ChapterRecord:
    path: str
    name: str


@dataclass(frozen=True, slots=True)
class FlatPage:
    """A leaf topic with its fully resolved, normalized path."""

    chapter: str
    path: str
    name: str


@dataclass(frozen=True, slots=True)
class FlattenedBook:
    chapters: tuple[ChapterRecord, ...] = field(default_factory=tuple)
    pages: tuple[FlatPage, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class EnrichedPage:
    """A flattened page joined with its timestamp and feed metadata."""

    page: FlatPage
    last_modified: datetime
    is_latest_version: str
    os_version: str
    book_title: str
    product_category: str
    product_family: str
    group_id: str

    @property
    def path(self) -> str:
        return self.page.path
