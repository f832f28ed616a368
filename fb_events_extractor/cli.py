"""
Command Line Interface

Entry point for running a search from the command line.

Usage:
    python -m fb_events_extractor --lat 40.710803 --lng -73.964040
    python -m fb_events_extractor --lat 52.52 --lng 13.40 --distance 1000 --sort time
    python -m fb_events_extractor --lat 48.85 --lng 2.35 --query "jazz" -o events.json
"""

import argparse
import json
import sys

from .config import ALLOWED_SORTS, DEFAULT_API_VERSION, DEFAULT_DISTANCE, DEFAULT_MAX_EXTRA_ROUNDS
from .exceptions import EventSearchError
from .extractor import EventSearch


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Facebook Events Extractor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fb_events_extractor --lat 40.710803 --lng -73.964040
  python -m fb_events_extractor --lat 52.52 --lng 13.40 --distance 1000 --sort time
  python -m fb_events_extractor --lat 48.85 --lng 2.35 --query "jazz" -o events.json

The access token is read from FEBL_ACCESS_TOKEN unless --token is given.
        """
    )

    parser.add_argument("--lat", type=float, help="Latitude of the search center")
    parser.add_argument("--lng", type=float, help="Longitude of the search center")
    parser.add_argument(
        "-d", "--distance",
        type=int,
        default=DEFAULT_DISTANCE,
        help=f"Search radius (default: {DEFAULT_DISTANCE})"
    )
    parser.add_argument("--query", help="Free-text filter for the place search")
    parser.add_argument(
        "--sort",
        help=f"Sort events by one of: {', '.join(ALLOWED_SORTS)}"
    )
    parser.add_argument(
        "--version",
        default=DEFAULT_API_VERSION,
        help=f"Graph API version (default: {DEFAULT_API_VERSION})"
    )
    parser.add_argument("--token", help="Graph API access token")
    parser.add_argument(
        "--max-extra-rounds",
        type=int,
        default=DEFAULT_MAX_EXTRA_ROUNDS,
        help=f"Admin-discovery rounds after the first one (default: {DEFAULT_MAX_EXTRA_ROUNDS})"
    )
    parser.add_argument("-o", "--output", help="Write the JSON result to this file")
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress progress output"
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Main CLI entry point."""
    args = parse_args(argv)

    search = EventSearch(
        lat=args.lat,
        lng=args.lng,
        distance=args.distance,
        access_token=args.token,
        query=args.query,
        sort=args.sort,
        version=args.version,
        max_extra_rounds=args.max_extra_rounds,
        # stdout carries the JSON when no output file is given
        verbose=not args.quiet and args.output is not None,
    )

    try:
        result = search.search_sync()
    except EventSearchError as e:
        print(f"\nError ({e.code}): {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n\nInterrupted by user.", file=sys.stderr)
        return 130

    output = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(output)
        if not args.quiet:
            print(f"JSON output: {args.output}")
    else:
        print(output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
