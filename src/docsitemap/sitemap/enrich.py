"""Join flattened pages with their last-modified time and feed metadata."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable

from docsitemap.books.models import Book, EnrichedPage, FlatPage
from docsitemap.config import SitemapSettings
from docsitemap.metadata.resolver import MetadataResolver


LastModifiedLookup = Callable[[str], Awaitable[datetime]]


@dataclass(slots=True)
class EnrichmentItemError(Exception):
    """Domain error for a page whose per-item lookup failed."""

    page_path: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (page={self.page_path})"


class PageEnricher:
    """Build :class:`EnrichedPage` records for the pages of one book."""

    def __init__(
        self,
        book: Book,
        *,
        settings: SitemapSettings,
        resolver: MetadataResolver,
        last_modified: LastModifiedLookup,
    ) -> None:
        self._book = book
        self._settings = settings
        self._resolver = resolver
        self._last_modified = last_modified

    def content_path(self, page: FlatPage) -> str:
        """Repository-relative source file for a page path."""

        return f".{page.path}{self._settings.content_suffix}"

    async def enrich(self, page: FlatPage) -> EnrichedPage:
        content_path = self.content_path(page)
        try:
            last_modified = await self._last_modified(content_path)
        except Exception as exc:
            raise EnrichmentItemError(
                page_path=page.path,
                message=f"Last-modified lookup failed for {content_path}: {exc}",
            ) from exc

        os_version = await self._resolver.os_version(self._book.source_dir)
        is_latest_version = await self._resolver.latest_version_flag(self._book.source_dir)

        return EnrichedPage(
            page=page,
            last_modified=last_modified,
            is_latest_version=is_latest_version,
            os_version=os_version,
            book_title=self._book.title,
            product_category=self._settings.product_category,
            product_family=self._settings.product_family,
            group_id=self._settings.group_id(self._book.title),
        )
