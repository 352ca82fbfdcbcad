#!/usr/bin/env python3
"""
Main entry point for URL shortener service.

Concurrency: requests are served concurrently on the event loop (FastAPI +
asyncio). Set WORKERS > 1 for multi-process scaling; every worker opens its own
store connections, and the store's unique constraint keeps short codes unique
across all of them.

Usage:
    python app.py

Environment variables:
    DATABASE_URL - Store URL (sqlite:///./database.sqlite or postgresql://...)
    DATABASE_CREATE_TABLES - Create the urls table on startup (default true)
    REDIS_URL - Redis connection URL (optional)
    BASE_URL - Base URL for short links
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from snaplink.allocator import CodeAllocator
from snaplink.common.logging_config import setup_logging
from snaplink.config import load_config
from snaplink.database import create_store
from snaplink.database.cache import RedisCache
from snaplink.service import URLShortenerService
from snaplink.shortcode import ShortCodeGenerator
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the store, cache and service on startup; close them on shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting URL shortener service...")

    db = create_store(
        config.database_url,
        pool_max_size=config.database_pool_max_size,
        logger=logger,
    )
    if config.database_create_tables:
        await db.initialize()

    cache = None
    if config.redis_url:
        logger.info(f"Connecting to Redis at {config.redis_url}")
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger,
        )
        await cache.connect()
    else:
        logger.info("Redis caching disabled")

    generator = ShortCodeGenerator(
        default_length=config.short_code_length,
        alphabet=config.short_code_alphabet,
    )
    allocator = CodeAllocator(
        generator=generator,
        max_attempts=config.max_allocation_attempts,
        logger=logger,
    )
    service = URLShortenerService(
        db=db,
        cache=cache,
        allocator=allocator,
        logger=logger,
    )
    app.state.service = service

    logger.info("Service started successfully")

    try:
        yield
    finally:
        logger.info("Shutting down URL shortener service...")
        await service.close()
        logger.info("Service stopped")


def build_app(config=None) -> FastAPI:
    """Build the ASGI app with logging and the lifespan installed."""
    config = config or load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    app = create_app(service_instance=None, config=config)
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    return app


def main():
    """Main entry point."""
    config = load_config()
    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("URL Shortener Service")
    logger.info(f"Configuration: {config.model_dump()}")
    logger.info(f"Starting server on {config.host}:{config.port} with {config.workers} worker(s)")

    # An import string lets uvicorn rebuild the app in each worker process;
    # uvicorn handles SIGINT/SIGTERM and drains connections before exiting
    try:
        uvicorn.run(
            "app:build_app",
            factory=True,
            host=config.host,
            port=config.port,
            workers=config.workers,
            log_level=config.log_level.lower(),
            access_log=True,
        )
    except OSError as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
