"""Metadata feed loading and per-book field resolution."""

from .feed import MetadataFeedClient, MetadataFetchError, MetadataRow
from .resolver import MetadataResolver

__all__ = ["MetadataFeedClient", "MetadataFetchError", "MetadataResolver", "MetadataRow"]
