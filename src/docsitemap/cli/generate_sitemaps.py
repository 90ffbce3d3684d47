"""CLI command that writes one sitemap per locale and reports a JSON summary."""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import replace
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from docsitemap.config import SitemapSettings
from docsitemap.sitemap.service import generate_sitemaps


logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate per-locale documentation sitemaps")
    parser.add_argument(
        "--locale",
        action="append",
        dest="locales",
        help="Locale to process (repeatable, overrides SITEMAP_LOCALES)",
    )
    parser.add_argument("--repo-root", help="Repository root holding the docs directory")
    parser.add_argument("--output-dir", help="Sitemap output directory, relative to the repo root")
    parser.add_argument("--concurrency", type=int, help="Maximum pages enriched at once")
    return parser


def _apply_overrides(settings: SitemapSettings, args: argparse.Namespace) -> SitemapSettings:
    overrides: dict[str, object] = {}
    if args.locales:
        overrides["locales"] = tuple(dict.fromkeys(locale.strip() for locale in args.locales if locale.strip()))
    if args.repo_root:
        overrides["repo_root"] = Path(args.repo_root)
    if args.output_dir:
        overrides["output_dir"] = Path(args.output_dir)
    if args.concurrency is not None:
        if args.concurrency < 1:
            raise ValueError("--concurrency must be >= 1")
        overrides["concurrency"] = args.concurrency
    if "locales" in overrides and not overrides["locales"]:
        raise ValueError("--locale cannot be empty")
    return replace(settings, **overrides)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    load_dotenv()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    try:
        settings = _apply_overrides(SitemapSettings.from_env(), args)
    except ValueError as exc:
        logger.error("Configuration error: %s", exc)
        return 2

    report = asyncio.run(generate_sitemaps(settings))

    payload = {
        "locales": list(settings.locales),
        "results": [
            {
                "locale": result.locale,
                "books": result.book_count,
                "pages": result.page_count,
                "output_path": str(result.output_path),
            }
            for result in report.results
        ],
        "errors": [
            {"locale": failure.locale, "error_type": failure.error_type, "error": failure.error}
            for failure in report.failures
        ],
    }
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    logger.info("Generated sitemaps for %s of %s locales", len(report.results), len(settings.locales))
    return 0 if report.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
