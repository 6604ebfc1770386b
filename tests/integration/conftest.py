"""Integration test configuration.

These tests require real Supabase and R2 credentials and are skipped by
default. Set SUPABASE_URL, SUPABASE_KEY, R2_ENDPOINT, R2_ACCESS_KEY and
R2_SECRET_KEY to enable them.
"""

import os

import pytest

skip_no_creds = pytest.mark.skipif(
    not all(
        os.environ.get(name)
        for name in (
            "SUPABASE_URL",
            "SUPABASE_KEY",
            "R2_ENDPOINT",
            "R2_ACCESS_KEY",
            "R2_SECRET_KEY",
        )
    ),
    reason="Integration tests require Supabase and R2 credentials in the environment",
)


def pytest_collection_modifyitems(config, items):
    """Apply the credentials skip to every test in this directory."""
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(skip_no_creds)
