"""Path segment normalization for book, chapter and topic identifiers."""

from __future__ import annotations

import re
import unicodedata

_SEPARATOR_RE = re.compile(r"[^a-z0-9]+")


def normalize_path(identifier: str) -> str:
    """Turn a raw tree identifier into a lowercase, dash-separated URL segment.

    The result only contains ``[a-z0-9-]``, never starts or ends with ``-`` and
    is stable under repeated application.
    """

    decomposed = unicodedata.normalize("NFKD", identifier)
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return _SEPARATOR_RE.sub("-", stripped.lower()).strip("-")
