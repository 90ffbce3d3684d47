"""Generate one sitemap per locale from the book manifests under ``docs/``."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from pathlib import Path

from docsitemap.books.flatten import flatten_book
from docsitemap.books.loader import discover_books
from docsitemap.books.models import EnrichedPage
from docsitemap.config import SitemapSettings
from docsitemap.metadata.feed import MetadataFeedClient
from docsitemap.metadata.resolver import MetadataResolver
from docsitemap.pipeline.bounded import run_bounded
from docsitemap.sitemap.enrich import LastModifiedLookup, PageEnricher
from docsitemap.sitemap.lastmod import GitLastModified
from docsitemap.sitemap.writer import write_sitemap


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LocaleSitemapResult:
    locale: str
    book_count: int
    page_count: int
    output_path: Path


@dataclass(frozen=True, slots=True)
class LocaleFailure:
    locale: str
    error: str
    error_type: str


@dataclass(frozen=True, slots=True)
class SitemapRunReport:
    results: tuple[LocaleSitemapResult, ...]
    failures: tuple[LocaleFailure, ...]

    @property
    def success(self) -> bool:
        return not self.failures


def build_resolver(settings: SitemapSettings) -> MetadataResolver:
    """One resolver per run, shared by every locale and book."""

    client = MetadataFeedClient(settings.metadata_url, timeout_seconds=settings.fetch_timeout_seconds)
    return MetadataResolver(
        client.fetch_rows,
        book_prefix=settings.metadata_book_prefix,
        source=settings.metadata_url,
        fallback_is_latest_version=settings.fallback_is_latest_version,
        fallback_os_version=settings.fallback_os_version,
    )


async def generate_locale_sitemap(
    locale: str,
    *,
    settings: SitemapSettings,
    resolver: MetadataResolver,
    last_modified: LastModifiedLookup,
) -> LocaleSitemapResult:
    """Flatten and enrich every book of a locale, then write its sitemap.

    Nothing is written unless every page of every book was enriched.
    """

    books = discover_books(settings.locale_docs_dir(locale), repo_root=settings.repo_root)
    enriched: list[EnrichedPage] = []

    for book in books:
        flattened = flatten_book(book)
        logger.info(
            "(%s) %s: %s chapters, %s pages",
            locale,
            book.repo_path,
            len(flattened.chapters),
            len(flattened.pages),
        )
        enricher = PageEnricher(book, settings=settings, resolver=resolver, last_modified=last_modified)
        enriched.extend(await run_bounded(flattened.pages, enricher.enrich, concurrency=settings.concurrency))

    output_path = write_sitemap(settings.sitemap_path(locale), enriched, settings)
    logger.info("(%s) wrote %s urls to %s", locale, len(enriched), output_path)
    return LocaleSitemapResult(
        locale=locale,
        book_count=len(books),
        page_count=len(enriched),
        output_path=output_path,
    )


async def generate_sitemaps(
    settings: SitemapSettings,
    *,
    resolver: MetadataResolver | None = None,
    last_modified: LastModifiedLookup | None = None,
) -> SitemapRunReport:
    """Run every configured locale concurrently; a failed locale does not stop the others."""

    shared_resolver = resolver or build_resolver(settings)
    lookup = last_modified or GitLastModified(settings.repo_root)

    outcomes = await asyncio.gather(
        *(
            generate_locale_sitemap(locale, settings=settings, resolver=shared_resolver, last_modified=lookup)
            for locale in settings.locales
        ),
        return_exceptions=True,
    )

    results: list[LocaleSitemapResult] = []
    failures: list[LocaleFailure] = []
    for locale, outcome in zip(settings.locales, outcomes):
        if isinstance(outcome, LocaleSitemapResult):
            results.append(outcome)
            continue
        if not isinstance(outcome, Exception):
            raise outcome
        logger.error("(%s) sitemap generation failed: %s", locale, outcome, exc_info=outcome)
        failures.append(LocaleFailure(locale=locale, error=str(outcome), error_type=type(outcome).__name__))

    return SitemapRunReport(results=tuple(results), failures=tuple(failures))
