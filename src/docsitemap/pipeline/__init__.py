"""Bounded, order-preserving async processing."""

from .bounded import iter_bounded, run_bounded

__all__ = ["iter_bounded", "run_bounded"]
