"""
Package entry point.

Allows running: python -m fb_events_extractor --lat 40.71 --lng -73.96
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
