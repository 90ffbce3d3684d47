"""HTTP client for the book metadata feed (a JSON sheet with a ``data`` array)."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from types import MappingProxyType
from typing import Any, Mapping

import httpx


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MetadataFetchError(RuntimeError):
    """Domain error raised when the metadata feed cannot be loaded."""

    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (source={self.source})"


@dataclass(frozen=True, slots=True)
class MetadataRow:
    """One feed row: the book path it describes plus its named fields."""

    book: str
    fields: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def get(self, name: str) -> str | None:
        value = self.fields.get(name)
        return value if value else None


def parse_rows(payload: object, *, source: str) -> tuple[MetadataRow, ...]:
    """Validate a decoded feed payload and return its rows in feed order."""

    if not isinstance(payload, Mapping):
        raise MetadataFetchError(source=source, message="Metadata payload is not an object")

    data = payload.get("data")
    if not isinstance(data, list):
        raise MetadataFetchError(source=source, message="Metadata payload missing list 'data'")

    rows: list[MetadataRow] = []
    for index, item in enumerate(data):
        if not isinstance(item, Mapping):
            logger.warning("Skipping metadata row %s: not an object", index)
            continue
        book = item.get("book")
        if not isinstance(book, str) or not book.strip():
            logger.warning("Skipping metadata row %s: missing 'book' path", index)
            continue

        values = {
            str(key): str(value)
            for key, value in item.items()
            if key != "book" and value is not None
        }
        rows.append(MetadataRow(book=book.strip(), fields=MappingProxyType(values)))

    return tuple(rows)


class MetadataFeedClient:
    """Fetch and parse the metadata feed with a single GET request."""

    def __init__(
        self,
        url: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

        self._url = url
        self._client = client
        self._timeout_seconds = timeout_seconds

    @property
    def url(self) -> str:
        return self._url

    async def fetch_rows(self) -> tuple[MetadataRow, ...]:
        logger.info("Fetching metadata feed from %s", self._url)
        payload = await self._request_payload()
        rows = parse_rows(payload, source=self._url)
        logger.info("Loaded %s metadata rows", len(rows))
        return rows

    async def _request_payload(self) -> Any:
        try:
            if self._client is not None:
                response = await self._client.get(self._url, timeout=self._timeout_seconds)
            else:
                async with httpx.AsyncClient(timeout=self._timeout_seconds, follow_redirects=True) as client:
                    response = await client.get(self._url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise MetadataFetchError(
                source=self._url,
                message=f"Metadata feed returned HTTP {exc.response.status_code}",
            ) from exc
        except httpx.HTTPError as exc:
            raise MetadataFetchError(source=self._url, message=f"Metadata feed request failed: {exc}") from exc

        try:
            return response.json()
        except ValueError as exc:
            raise MetadataFetchError(source=self._url, message=f"Metadata feed returned invalid JSON: {exc}") from exc
