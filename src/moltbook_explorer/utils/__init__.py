"""Utility helpers for moltbook explorer."""

from .logging import setup_logging

__all__ = ["setup_logging"]
