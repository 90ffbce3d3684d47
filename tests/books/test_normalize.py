from __future__ import annotations

import pytest

from docsitemap.books.normalize import normalize_path


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("get-started", "get-started"),
        ("Get Started With Prisma Cloud", "get-started-with-prisma-cloud"),
        ("admin_guide", "admin-guide"),
        ("  --Weird//Name!!  ", "weird-name"),
        ("Café Résumé", "cafe-resume"),
        ("v2.1 release", "v2-1-release"),
        ("", ""),
        ("///", ""),
    ],
)
def test_normalize_path_produces_url_safe_segments(raw: str, expected: str) -> None:
    assert normalize_path(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "already-clean",
        "MiXeD Case",
        "illegal<>:\"|?*chars",
        "trailing-dash-",
        "-leading",
        "",
        "   ",
        "ß and İstanbul",
        "日本語のトピック",
        "a..b__c  d",
    ],
)
def test_normalize_path_is_idempotent(raw: str) -> None:
    once = normalize_path(raw)

    assert normalize_path(once) == once


def test_normalize_path_never_emits_separators_or_uppercase() -> None:
    result = normalize_path("Topics/Sub Topic\\Leaf.ADOC")

    assert "/" not in result
    assert "\\" not in result
    assert result == result.lower()
    assert not result.startswith("-") and not result.endswith("-")
