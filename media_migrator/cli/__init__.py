"""Command-line interface for the media migration tool."""
