from __future__ import annotations

from typing import List, Protocol

from ..types import RawItem


class ExtractionAdapter(Protocol):
    async def open(self, url: str, timeout_ms: int) -> None:
        """Load the first listing page and wait until its rows are present."""

    async def extract_current_page(self) -> List[RawItem]:
        """Return the rows of the page currently loaded, in presentation order.

        Returns an empty list when the page has no rows. Must be callable
        repeatedly against the same live view after navigation.
        """

    async def has_next_page(self) -> bool:
        """Whether the "next page" affordance is present on the current page."""

    async def next_page(self, timeout_ms: int) -> None:
        """Follow the "next page" affordance and wait for the new rows.

        Raises on failure or timeout; callers wrap this in a retry policy.
        """
