"""
Paginated collection of timestamped items with retrying navigation.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional

from ..adapters.base import ExtractionAdapter
from ..config import RunConfig
from ..exceptions import NavigationError
from ..types import CollectionResult, Item, StopReason


logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


async def advance(
    navigation_action: Callable[[], Awaitable[Any]],
    config: RunConfig,
    sleep: Sleep = asyncio.sleep,
) -> None:
    """
    Run a navigation action with a constant-delay retry policy.

    Args:
        navigation_action: Zero-argument coroutine function performing the navigation
        config: Supplies max_retries (total attempts, at least one) and retry_delay_ms
        sleep: Awaitable sleep taking seconds

    Raises:
        NavigationError: every attempt failed; carries the attempt count and last error
    """
    attempts = max(1, config.max_retries)
    delay_s = config.retry_delay_ms / 1000
    last_error: Optional[BaseException] = None

    for attempt in range(1, attempts + 1):
        try:
            await navigation_action()
            return
        except Exception as exc:  # noqa: BLE001
            last_error = exc
            if attempt == attempts:
                break
            logger.warning(
                f"⚠️ Navigation attempt {attempt}/{attempts} failed ({exc}), "
                f"retrying in {config.retry_delay_ms}ms..."
            )
            await sleep(delay_s)

    raise NavigationError(attempts, last_error) from last_error


async def collect(
    adapter: ExtractionAdapter,
    config: RunConfig,
    sleep: Sleep = asyncio.sleep,
) -> CollectionResult:
    """
    Collect items page by page until the target count is reached.

    Running out of pages (an empty page or no "next" link) is a normal terminal
    condition: the result is simply shorter than the target. Only a navigation
    that exhausts its retries raises.
    """
    target = config.target_count
    items: List[Item] = []
    page_num = 1
    dropped_total = 0
    stop_reason = StopReason.QUOTA_MET

    while len(items) < target:
        logger.info(f"Scraping page {page_num}... ({len(items)}/{target} items so far)")
        raw_items = await adapter.extract_current_page()

        if not raw_items:
            logger.warning(f"⚠️ Page {page_num} is empty, stopping collection.")
            stop_reason = StopReason.EMPTY_PAGE
            break

        survivors = [
            Item(
                title=raw["title"],
                timestamp=raw["timestamp_raw"],
                relative_age_text=raw["relative_age_text"],
            )
            for raw in raw_items
            if raw["timestamp_raw"]
        ]
        dropped = len(raw_items) - len(survivors)
        if dropped:
            dropped_total += dropped
            logger.warning(f"⚠️ {dropped} item(s) missing timestamps on page {page_num}.")

        items.extend(survivors)
        page_num += 1

        if len(items) < target:
            if not await adapter.has_next_page():
                logger.warning("⚠️ No next-page link found, ran out of pages.")
                stop_reason = StopReason.NO_NEXT_PAGE
                break

            await advance(
                lambda: adapter.next_page(config.navigation_timeout_ms),
                config,
                sleep=sleep,
            )

    return CollectionResult(
        items=items[:target],
        target_count=target,
        stop_reason=stop_reason,
        pages_visited=page_num - 1,
        dropped_count=dropped_total,
    )
