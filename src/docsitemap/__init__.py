"""Flatten documentation book trees into enriched, per-locale sitemaps."""
