from .base import ExtractionAdapter
from .hacker_news import HackerNewsAdapter, parse_listing_html
from .registry import get_adapter_for

__all__ = [
    "ExtractionAdapter",
    "HackerNewsAdapter",
    "parse_listing_html",
    "get_adapter_for",
]
