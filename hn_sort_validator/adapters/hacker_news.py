from __future__ import annotations

import logging
from typing import Any, List, Optional

from bs4 import BeautifulSoup

from ..types import RawItem


logger = logging.getLogger(__name__)


ROW_SELECTOR = "tr.athing"
TITLE_SELECTOR = "td.title span.titleline > a"
AGE_SELECTOR = "span.age"
MORE_LINK_SELECTOR = "a.morelink"


def _normalize_timestamp(value: Optional[str]) -> Optional[str]:
    # HN renders title="2025-01-15T10:20:30 1736936430"; keep the ISO part
    if not value:
        return None
    parts = value.strip().split()
    return parts[0] if parts else None


def parse_listing_html(html: str) -> List[RawItem]:
    """Extract listing rows from an HN-shaped page.

    Each ``tr.athing`` row is paired with the subtext row right after it,
    which carries the ``span.age`` element with the precise timestamp.
    """
    soup = BeautifulSoup(html, "html.parser")
    items: List[RawItem] = []
    for row in soup.select(ROW_SELECTOR):
        anchor = row.select_one(TITLE_SELECTOR)
        title = anchor.get_text(strip=True) if anchor else ""

        subtext = row.find_next_sibling("tr")
        age = subtext.select_one(AGE_SELECTOR) if subtext is not None else None

        items.append(
            {
                "title": title or "(untitled)",
                "timestamp_raw": _normalize_timestamp(age.get("title")) if age else None,
                "relative_age_text": age.get_text(strip=True) if age else "",
            }
        )
    return items


class HackerNewsAdapter:
    """Extraction adapter for Hacker News listings, driven by a Playwright page."""

    def __init__(self, page: Any):
        self.page = page

    async def open(self, url: str, timeout_ms: int) -> None:
        await self.page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
        await self.page.wait_for_selector(AGE_SELECTOR, timeout=timeout_ms)

    async def extract_current_page(self) -> List[RawItem]:
        html = await self.page.content()
        items = parse_listing_html(html)
        logger.debug(f"Extracted {len(items)} rows from {self.page.url}")
        return items

    async def has_next_page(self) -> bool:
        return await self.page.locator(MORE_LINK_SELECTOR).count() > 0

    async def next_page(self, timeout_ms: int) -> None:
        link = self.page.locator(MORE_LINK_SELECTOR).first
        async with self.page.expect_navigation(wait_until="domcontentloaded", timeout=timeout_ms):
            await link.click(timeout=timeout_ms)
        await self.page.wait_for_selector(AGE_SELECTOR, timeout=timeout_ms)
