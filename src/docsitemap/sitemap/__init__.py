"""Sitemap enrichment, serialization and per-locale generation."""

from .enrich import EnrichmentItemError, PageEnricher
from .lastmod import GitLastModified
from .service import SitemapRunReport, generate_locale_sitemap, generate_sitemaps
from .writer import build_sitemap, write_sitemap

__all__ = [
    "EnrichmentItemError",
    "GitLastModified",
    "PageEnricher",
    "SitemapRunReport",
    "build_sitemap",
    "generate_locale_sitemap",
    "generate_sitemaps",
    "write_sitemap",
]
