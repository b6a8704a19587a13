#!/usr/bin/env python
"""
Scrape product links from the command line.

    linkcart-scrape "check https://example.com/p/1 and https://example.com/p/2"
    pbpaste | linkcart-scrape --workspace wishlist
"""
from __future__ import annotations

import argparse
import logging
import sys

import orjson

from web_scraping.scrape.scrape import EmptyInputError

from .config import get_settings
from .deps import build_cache, build_orchestrator


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Extract product records from URLs found in free text.")
    parser.add_argument("text", nargs="*", help="Text blocks containing URLs (default: read stdin).")
    parser.add_argument("--workspace", default="default", help="Workspace id the records are cached under.")
    parser.add_argument("--no-cache", action="store_true", help="Skip the product cache entirely.")
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), stream=sys.stderr)

    raw = args.text or sys.stdin.read()
    cache = None if args.no_cache else build_cache(settings)
    orchestrator = build_orchestrator(settings, cache)

    try:
        records = orchestrator.scrape_batch_sync(raw, args.workspace)
    except EmptyInputError as exc:
        print(f"Scrape failed: {exc}", file=sys.stderr)
        return 2

    out = [r.model_dump(mode="json", exclude_none=True) for r in records]
    sys.stdout.write(orjson.dumps(out, option=orjson.OPT_INDENT_2).decode() + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
