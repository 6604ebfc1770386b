#!/usr/bin/env python3
"""
Main execution module for the media migration tool
"""

from media_migrator.cli.commands import main

if __name__ == "__main__":
    main()
