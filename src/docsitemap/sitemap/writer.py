"""Serialize enriched pages into a sitemap ``urlset`` with coveo metadata."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from lxml import etree

from docsitemap.books.models import EnrichedPage
from docsitemap.config import DOCS_PREFIX, SitemapSettings


SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
XHTML_NS = "http://www.w3.org/1999/xhtml"
COVEO_NS = "https://www.coveo.com/schemas/metadata"
NSMAP = {None: SITEMAP_NS, "xhtml": XHTML_NS, "coveo": COVEO_NS}


def format_timestamp(value: datetime) -> str:
    """UTC ISO-8601 with milliseconds and a ``Z`` suffix."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def page_location(page_path: str, settings: SitemapSettings) -> str:
    # the published site has no /docs segment
    path = page_path[len(DOCS_PREFIX):] if page_path.startswith(f"{DOCS_PREFIX}/") else page_path
    return f"{settings.origin}{settings.root_path}{path}"


def _text(parent: etree._Element, tag: str, text: str, *, namespace: str = SITEMAP_NS) -> etree._Element:
    element = etree.SubElement(parent, f"{{{namespace}}}{tag}")
    element.text = text
    return element


def _append_url(urlset: etree._Element, page: EnrichedPage, settings: SitemapSettings) -> None:
    last_modified = format_timestamp(page.last_modified)

    url = etree.SubElement(urlset, f"{{{SITEMAP_NS}}}url")
    _text(url, "loc", page_location(page.path, settings))
    _text(url, "lastmod", last_modified)
    _text(url, "changefreq", settings.change_freq)
    _text(url, "priority", settings.priority)

    metadata = etree.SubElement(url, f"{{{COVEO_NS}}}metadata")
    _text(metadata, "sitemap_modificationdate", last_modified)
    _text(metadata, "sitemap_docType", settings.doc_type)
    _text(metadata, "sitemap_book-name", page.book_title)
    _text(metadata, "sitemap_productcategory", page.product_category)
    _text(metadata, "sitemap_osversion", page.os_version)
    _text(metadata, "sitemap_productFamily", page.product_family)
    _text(metadata, "sitemap_groupId", page.group_id)
    _text(metadata, "sitemap_isLatestVersion", page.is_latest_version)


def build_sitemap(pages: Iterable[EnrichedPage], settings: SitemapSettings) -> bytes:
    urlset = etree.Element(f"{{{SITEMAP_NS}}}urlset", nsmap=NSMAP)
    for page in pages:
        _append_url(urlset, page, settings)
    return etree.tostring(urlset, xml_declaration=True, encoding="utf-8", pretty_print=True)


def write_sitemap(path: str | Path, pages: Iterable[EnrichedPage], settings: SitemapSettings) -> Path:
    target = Path(path)
    content = build_sitemap(pages, settings)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)
    return target
