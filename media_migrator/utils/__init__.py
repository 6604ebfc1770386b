"""Shared utilities for logging, retries and media classification."""

__all__ = [
    "logging",
    "media",
    "retry",
]
