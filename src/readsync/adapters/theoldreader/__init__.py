"""Public interface for the TheOldReader adapter."""

from __future__ import annotations

from .client import TheOldReaderAPIError, TheOldReaderFetcher

__all__ = [
    "TheOldReaderAPIError",
    "TheOldReaderFetcher",
]
