#!/usr/bin/env python3
"""
Supabase Storage to Cloudflare R2 media migration tool
"""

__version__ = "0.1.0"

from media_migrator.core.config import load_config
from media_migrator.core.migrator import MediaMigrator
from media_migrator.core.stats import RunStats
from media_migrator.utils.retry import retry
