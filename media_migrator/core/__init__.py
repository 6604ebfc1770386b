"""Core migration logic including configuration and orchestration."""

__all__ = [
    "config",
    "context",
    "migrator",
    "pipeline",
    "stats",
]
