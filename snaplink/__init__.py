"""Core business logic for URL shortener."""

from .allocator import CodeAllocator
from .shortcode import ShortCodeGenerator
from .service import URLShortenerService

__all__ = ["CodeAllocator", "ShortCodeGenerator", "URLShortenerService"]
