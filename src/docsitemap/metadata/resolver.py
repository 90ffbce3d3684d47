"""Per-book enrichment fields resolved from a lazily loaded metadata table."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Sequence

from docsitemap.config import FALLBACK_IS_LATEST_VERSION, FALLBACK_OS_VERSION
from docsitemap.metadata.feed import MetadataFetchError, MetadataRow


IS_LATEST_VERSION_FIELD = "is-latest-version"
OS_VERSION_FIELD = "os-version"

logger = logging.getLogger(__name__)

RowFetcher = Callable[[], Awaitable[Sequence[MetadataRow]]]


class MetadataResolver:
    """Single-flight cache over the metadata table, owned by one generation run.

    The first lookup starts the table fetch; concurrent lookups await the same
    task. A failed fetch is kept and re-raised to every later caller.
    """

    def __init__(
        self,
        fetch_rows: RowFetcher,
        *,
        book_prefix: str,
        source: str = "metadata",
        fallback_is_latest_version: str = FALLBACK_IS_LATEST_VERSION,
        fallback_os_version: str = FALLBACK_OS_VERSION,
    ) -> None:
        self._fetch_rows = fetch_rows
        self._book_prefix = book_prefix
        self._source = source
        self._fallback_is_latest_version = fallback_is_latest_version
        self._fallback_os_version = fallback_os_version
        self._table: tuple[MetadataRow, ...] | None = None
        self._pending: asyncio.Task[tuple[MetadataRow, ...]] | None = None

    @property
    def is_loaded(self) -> bool:
        return self._table is not None

    async def latest_version_flag(self, book_dir: str) -> str:
        return await self._field(book_dir, IS_LATEST_VERSION_FIELD, self._fallback_is_latest_version)

    async def os_version(self, book_dir: str) -> str:
        return await self._field(book_dir, OS_VERSION_FIELD, self._fallback_os_version)

    async def find_row(self, book_dir: str) -> MetadataRow | None:
        """Return the first row whose cropped book path is a suffix of ``book_dir``."""

        table = await self._load()
        for row in table:
            tail = self._crop(row.book)
            if tail and book_dir.endswith(tail):
                return row
        return None

    async def _field(self, book_dir: str, name: str, fallback: str) -> str:
        row = await self.find_row(book_dir)
        if row is None:
            logger.debug("No metadata row for %s, using fallback for %s", book_dir, name)
            return fallback
        return row.get(name) or fallback

    def _crop(self, book_path: str) -> str:
        if book_path.startswith(self._book_prefix):
            return book_path[len(self._book_prefix):]
        return book_path

    async def _load(self) -> tuple[MetadataRow, ...]:
        if self._table is not None:
            return self._table
        if self._pending is None:
            self._pending = asyncio.create_task(self._fetch_table())
        # shield: a cancelled caller must not cancel the fetch other callers share
        return await asyncio.shield(self._pending)

    async def _fetch_table(self) -> tuple[MetadataRow, ...]:
        try:
            rows = await self._fetch_rows()
        except MetadataFetchError:
            raise
        except Exception as exc:
            raise MetadataFetchError(source=self._source, message=f"Metadata fetch failed: {exc}") from exc

        self._table = tuple(rows)
        return self._table
