#!/usr/bin/env python3
"""
Stream a chat answer or a generated document from Skald to stdout

Usage:
    uv run python scripts/stream_chat.py "What were the main points of the Q1 meeting?"
    uv run python scripts/stream_chat.py "Create an API integration guide" --generate --rules "Use code examples"
    uv run python scripts/stream_chat.py "Security practices?" --filter source=security-docs

The API key is read from SKALD_API_KEY (environment or .env).
"""

import argparse
import asyncio
import sys
from contextlib import aclosing
from pathlib import Path
from typing import List

# Add project path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from loguru import logger

from skald import Filter, Skald, SkaldError


def parse_filters(raw_filters: List[str]) -> List[Filter]:
    """Turn field=value arguments into native_field eq filters"""
    filters = []
    for raw in raw_filters:
        field, sep, value = raw.partition("=")
        if not sep:
            raise SystemExit(f"Invalid --filter {raw!r}, expected field=value")
        filters.append(Filter(field=field, operator="eq", value=value, filter_type="native_field"))
    return filters


async def main():
    parser = argparse.ArgumentParser(
        description="Stream a Skald chat answer or generated document",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("query", help="Question (chat) or prompt (--generate)")
    parser.add_argument("--generate", action="store_true", help="Generate a document instead of chatting")
    parser.add_argument("--rules", default=None, help="Style/format rules for --generate")
    parser.add_argument("--filter", action="append", default=[], help="field=value, repeatable")
    parser.add_argument("--base-url", default=None, help="Override SKALD_BASE_URL")
    parser.add_argument("--verbose", action="store_true", help="Show client debug logs")
    args = parser.parse_args()

    if args.verbose:
        logger.remove()
        logger.add(sys.stderr, level="DEBUG", format="<green>{time:HH:mm:ss}</green> | <level>{level:8}</level> | <cyan>{message}</cyan>")
        logger.enable("skald")

    skald = Skald(base_url=args.base_url)
    filters = parse_filters(args.filter) or None

    if args.generate:
        stream = skald.streamed_generate_doc(args.query, rules=args.rules, filters=filters)
    else:
        stream = skald.streamed_chat(args.query, filters=filters)

    try:
        async with aclosing(stream) as events:
            async for event in events:
                if event.is_token:
                    print(event.content or "", end="", flush=True)
                elif event.is_done:
                    print()
    except SkaldError as e:
        logger.error(f"Request failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
