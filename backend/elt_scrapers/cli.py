#!/usr/bin/env python3
"""
Command line entry point for the ELT content scraper.

Usage:
    python -m elt_scrapers                  # Run all scrapers -> content.json
    python -m elt_scrapers --all            # Same as above
    python -m elt_scrapers bc               # Run one scraper -> content-britishcouncil.json
    python -m elt_scrapers --list           # List all scrapers

Examples:
    python -m elt_scrapers breaking --limit 5
    python -m elt_scrapers --static --output-dir /tmp/elt
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config import list_site_names, resolve_site_key
from .logging_config import setup_logging
from .manager import ScraperManager
from .settings import settings as default_settings

logger = logging.getLogger(__name__)

BANNER = """
╔════════════════════════════════════════════════════════════╗
║       ELT Content Scraper                                  ║
║       Educational English Content Extraction               ║
╚════════════════════════════════════════════════════════════╝
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Scrape ELT websites for lesson content')
    parser.add_argument('site', nargs='?', help='Run only this scraper (e.g. breaking, britishcouncil, bc)')
    parser.add_argument('--all', action='store_true', help='Run all scrapers (default)')
    parser.add_argument('--list', action='store_true', help='List all scrapers')
    parser.add_argument('--limit', type=int, default=None, help='Items per scraper')
    parser.add_argument('--static', action='store_true', help='Fetch with httpx instead of a headless browser')
    parser.add_argument('--output-dir', type=str, default=None, help='Directory for the JSON artifacts')
    parser.add_argument('--log-level', type=str, default=None, help='Logging level (DEBUG, INFO, ...)')
    return parser


def print_scrapers(manager: ScraperManager):
    """List all configured scrapers."""
    print("\nAvailable Scrapers\n")
    for site in manager.list_scrapers():
        status = "✅" if site['enabled'] else "⏳"
        aliases = f" (aliases: {', '.join(site['aliases'])})" if site['aliases'] else ''
        print(f"{status} {site['key']:15} - {site['name']}{aliases}")
        print(f"                   {site['url']}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the scraper from the command line.

    Returns:
        Process exit status (0 on success, 1 on usage or fatal error)
    """
    args = build_parser().parse_args(argv)

    if args.limit is not None and args.limit < 1:
        print(f"--limit must be at least 1, got {args.limit}", file=sys.stderr)
        return 1

    overrides = {}
    if args.static:
        overrides['scraper_fetch_mode'] = 'static'
    settings = default_settings.model_copy(update=overrides) if overrides else default_settings

    manager = ScraperManager(settings, output_dir=args.output_dir)

    if args.list:
        print_scrapers(manager)
        return 0

    site_key = None
    if args.site and not args.all:
        try:
            site_key = resolve_site_key(args.site)
        except ValueError:
            print(f"Unknown scraper: {args.site}", file=sys.stderr)
            print(f"Available scrapers: {', '.join(list_site_names())}", file=sys.stderr)
            return 1

    setup_logging(settings, level=args.log_level)

    try:
        if site_key:
            asyncio.run(manager.scrape_site(site_key, limit=args.limit))
        else:
            print(BANNER)
            asyncio.run(manager.scrape_all(limit=args.limit))
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
