from __future__ import annotations

from typing import Any, Callable

from .base import ExtractionAdapter
from .hacker_news import HackerNewsAdapter


AdapterFactory = Callable[[Any], ExtractionAdapter]


def get_adapter_for(url: str) -> AdapterFactory:
    # Every supported listing is HN-shaped for now
    # Later: map other domains to their own adapters
    return HackerNewsAdapter
