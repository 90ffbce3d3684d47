"""Runtime configuration for sitemap generation."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping


DEFAULT_METADATA_URL = "https://main--prisma-cloud-docs-website--hlxsites.hlx.live/metadata.json"
DEFAULT_LOCALES = ("en", "jp")
DEFAULT_ORIGIN = "https://docs.paloaltonetworks.com"
DEFAULT_ROOT_PATH = "/prisma/prisma-cloud"
DEFAULT_REPO_ROOT = "."
DEFAULT_DOCS_DIR = "docs"
DEFAULT_OUTPUT_DIR = "prisma/prisma-cloud/docs/sitemaps"
DEFAULT_CONCURRENCY = 8
DEFAULT_FETCH_TIMEOUT_SECONDS = 30.0

CHANGE_FREQ = "weekly"
PRIORITY = "1.0"
FALLBACK_IS_LATEST_VERSION = "not-applicable"
FALLBACK_OS_VERSION = "not-applicable"
DOC_TYPE = "bookDetailPage"
PRODUCT_CATEGORY = "Prisma, Prisma Cloud"
PRODUCT_FAMILY = "prisma-cloud"
CONTENT_SUFFIX = ".adoc"
DOCS_PREFIX = "/docs"


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _parse_positive_float(*, name: str, raw_value: str, minimum: float = 0.001) -> float:
    try:
        value = float(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _require_http_url(*, name: str, value: str) -> str:
    if not value:
        raise ValueError(f"{name} cannot be empty")
    if not (value.startswith("http://") or value.startswith("https://")):
        raise ValueError(f"{name} must start with http:// or https://")
    return value.rstrip("/")


def parse_locales(raw_value: str) -> tuple[str, ...]:
    locales = tuple(part.strip() for part in raw_value.split(",") if part.strip())
    if not locales:
        raise ValueError("SITEMAP_LOCALES must list at least one locale")
    return locales


@dataclass(frozen=True, slots=True)
class SitemapSettings:
    """Validated deployment settings for one sitemap generation run."""

    metadata_url: str = DEFAULT_METADATA_URL
    locales: tuple[str, ...] = DEFAULT_LOCALES
    origin: str = DEFAULT_ORIGIN
    root_path: str = DEFAULT_ROOT_PATH
    repo_root: Path = Path(DEFAULT_REPO_ROOT)
    docs_dir: Path = Path(DEFAULT_DOCS_DIR)
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    concurrency: int = DEFAULT_CONCURRENCY
    fetch_timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS
    change_freq: str = CHANGE_FREQ
    priority: str = PRIORITY
    fallback_is_latest_version: str = FALLBACK_IS_LATEST_VERSION
    fallback_os_version: str = FALLBACK_OS_VERSION
    doc_type: str = DOC_TYPE
    product_category: str = PRODUCT_CATEGORY
    product_family: str = PRODUCT_FAMILY
    content_suffix: str = CONTENT_SUFFIX

    @property
    def metadata_book_prefix(self) -> str:
        """Prefix of the feed's ``book`` column that local directories lack."""

        return f"{self.root_path}{DOCS_PREFIX}"

    def group_id(self, book_title: str) -> str:
        return f"{self.product_category}-{book_title}"

    def locale_docs_dir(self, locale: str) -> Path:
        return self.repo_root / self.docs_dir / locale

    def sitemap_path(self, locale: str) -> Path:
        return self.repo_root / self.output_dir / f"sitemap-{locale}.xml"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "SitemapSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        metadata_url = _require_http_url(
            name="SITEMAP_METADATA_URL",
            value=source.get("SITEMAP_METADATA_URL", DEFAULT_METADATA_URL).strip(),
        )
        origin = _require_http_url(
            name="SITEMAP_ORIGIN",
            value=source.get("SITEMAP_ORIGIN", DEFAULT_ORIGIN).strip(),
        )
        locales = parse_locales(source.get("SITEMAP_LOCALES", ",".join(DEFAULT_LOCALES)))

        root_path = source.get("SITEMAP_ROOT_PATH", DEFAULT_ROOT_PATH).strip().rstrip("/")
        if not root_path.startswith("/"):
            raise ValueError("SITEMAP_ROOT_PATH must start with /")

        repo_root_raw = source.get("SITEMAP_REPO_ROOT", DEFAULT_REPO_ROOT).strip()
        docs_dir_raw = source.get("SITEMAP_DOCS_DIR", DEFAULT_DOCS_DIR).strip()
        output_dir_raw = source.get("SITEMAP_OUTPUT_DIR", DEFAULT_OUTPUT_DIR).strip()
        if not repo_root_raw:
            raise ValueError("SITEMAP_REPO_ROOT cannot be empty")
        if not docs_dir_raw:
            raise ValueError("SITEMAP_DOCS_DIR cannot be empty")
        if not output_dir_raw:
            raise ValueError("SITEMAP_OUTPUT_DIR cannot be empty")

        concurrency = _parse_positive_int(
            name="SITEMAP_CONCURRENCY",
            raw_value=source.get("SITEMAP_CONCURRENCY", str(DEFAULT_CONCURRENCY)).strip(),
            minimum=1,
        )
        fetch_timeout_seconds = _parse_positive_float(
            name="SITEMAP_FETCH_TIMEOUT_SECONDS",
            raw_value=source.get("SITEMAP_FETCH_TIMEOUT_SECONDS", str(DEFAULT_FETCH_TIMEOUT_SECONDS)).strip(),
            minimum=0.1,
        )

        return cls(
            metadata_url=metadata_url,
            locales=locales,
            origin=origin,
            root_path=root_path,
            repo_root=Path(repo_root_raw),
            docs_dir=Path(docs_dir_raw),
            output_dir=Path(output_dir_raw),
            concurrency=concurrency,
            fetch_timeout_seconds=fetch_timeout_seconds,
        )
