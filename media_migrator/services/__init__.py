"""Service integrations for Supabase Storage, Cloudflare R2 and backing records."""

__all__ = [
    "destination",
    "records",
    "source",
]
