#!/usr/bin/env python3
"""
Command-line interface for URL shortener service.

Usage:
    python snaplink_cli.py shorten <url>
    python snaplink_cli.py get <short_code>
    python snaplink_cli.py info <short_code>
    python snaplink_cli.py health
"""

import argparse
import asyncio
import json
import os
import sys
from typing import Optional

# Add repository root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from snaplink.allocator import CodeAllocator
from snaplink.common.logging_config import setup_logging
from snaplink.database import create_store
from snaplink.database.cache import RedisCache
from snaplink.exceptions import SnaplinkError
from snaplink.service import URLShortenerService
from snaplink.shortcode import ShortCodeGenerator


def _print_json(payload: dict, error: bool = False) -> None:
    print(json.dumps(payload, indent=2), file=sys.stderr if error else sys.stdout)


class URLShortenerCLI:
    """Command-line interface for URL shortener."""

    def __init__(
        self,
        db_url: str,
        redis_url: Optional[str] = None,
        code_length: int = 7,
        verbose: bool = False,
    ):
        self.db_url = db_url
        self.redis_url = redis_url
        self.code_length = code_length
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.service = None

    async def initialize(self):
        """Initialize database and service."""
        db = create_store(self.db_url, logger=self.logger)
        await db.initialize()

        cache = None
        if self.redis_url:
            cache = RedisCache(redis_url=self.redis_url, logger=self.logger)
            await cache.connect()

        allocator = CodeAllocator(
            generator=ShortCodeGenerator(default_length=self.code_length),
            logger=self.logger,
        )
        self.service = URLShortenerService(
            db=db,
            cache=cache,
            allocator=allocator,
            logger=self.logger,
        )

    async def cleanup(self):
        if self.service:
            await self.service.close()

    async def shorten(self, url: str) -> int:
        """Shorten a URL."""
        try:
            mapping = await self.service.create_short_url(url)
        except SnaplinkError as e:
            _print_json({"success": False, "error": e.error_code, "detail": str(e)}, error=True)
            return 1

        _print_json({
            "success": True,
            **mapping.to_dict(),
            "message": f"Successfully shortened URL to: {mapping.short_code}",
        })
        return 0

    async def get(self, short_code: str) -> int:
        """Get original URL for a short code."""
        try:
            long_url = await self.service.resolve(short_code)
        except SnaplinkError as e:
            _print_json({"success": False, "error": e.error_code, "detail": str(e)}, error=True)
            return 1

        if long_url is None:
            _print_json({"success": False, "error": f"Short code '{short_code}' not found"}, error=True)
            return 1

        _print_json({"success": True, "short_code": short_code, "long_url": long_url})
        return 0

    async def info(self, short_code: str) -> int:
        """Print the complete mapping for a short code."""
        try:
            mapping = await self.service.get_url_info(short_code)
        except SnaplinkError as e:
            _print_json({"success": False, "error": e.error_code, "detail": str(e)}, error=True)
            return 1

        if mapping is None:
            _print_json({"success": False, "error": f"Short code '{short_code}' not found"}, error=True)
            return 1

        _print_json({"success": True, **mapping.to_dict()})
        return 0

    async def health(self) -> int:
        """Check service health."""
        health_status = await self.service.health_check()
        _print_json({"success": health_status["overall"], "health": health_status})
        return 0 if health_status["overall"] else 1


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="URL Shortener CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s shorten https://example.com/long/url

  # Get original URL
  %(prog)s get 3f9a1c0

  # Show the stored mapping
  %(prog)s info 3f9a1c0

  # Check health
  %(prog)s health
        """
    )

    parser.add_argument(
        "--db-url",
        default=os.getenv("DATABASE_URL", "sqlite:///./database.sqlite"),
        help="Store connection URL (default: from DATABASE_URL env or sqlite:///./database.sqlite)"
    )
    parser.add_argument(
        "--redis-url",
        default=os.getenv("REDIS_URL"),
        help="Redis connection URL (optional, default: from REDIS_URL env)"
    )
    parser.add_argument(
        "--code-length",
        type=int,
        default=int(os.getenv("SHORT_CODE_LENGTH", "7")),
        help="Length of generated short codes"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")

    get_parser = subparsers.add_parser("get", help="Get original URL")
    get_parser.add_argument("short_code", help="Short code to lookup")

    info_parser = subparsers.add_parser("info", help="Show stored mapping")
    info_parser.add_argument("short_code", help="Short code to lookup")

    subparsers.add_parser("health", help="Check service health")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    cli = URLShortenerCLI(
        db_url=args.db_url,
        redis_url=args.redis_url,
        code_length=args.code_length,
        verbose=args.verbose,
    )

    try:
        await cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url)
        elif args.command == "get":
            return await cli.get(args.short_code)
        elif args.command == "info":
            return await cli.info(args.short_code)
        elif args.command == "health":
            return await cli.health()

        parser.print_help()
        return 1

    except SnaplinkError as e:
        _print_json({"success": False, "error": e.error_code, "detail": str(e)}, error=True)
        return 1

    except ValueError as e:
        # Bad --db-url scheme or --code-length
        _print_json({"success": False, "error": "cli:invalid_option", "detail": str(e)}, error=True)
        return 1

    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
