from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional, Sequence

from ..exceptions import MalformedTimestampError
from ..types import Item, Violation


def parse_timestamp(value: Optional[str]) -> datetime:
    """Parse an ISO-8601 timestamp into an aware instant (naive means UTC)."""
    if not value or not isinstance(value, str):
        raise MalformedTimestampError(value)
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise MalformedTimestampError(value) from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def validate_sort_order(items: Sequence[Item]) -> List[Violation]:
    """Walk adjacent pairs and flag every item that is older than its successor.

    Equal timestamps are fine: the order is non-increasing, not strictly decreasing.
    """
    violations: List[Violation] = []
    if len(items) < 2:
        # Still fail fast on a lone malformed value
        for item in items:
            parse_timestamp(item.timestamp)
        return violations

    current = parse_timestamp(items[0].timestamp)
    for i in range(len(items) - 1):
        following = parse_timestamp(items[i + 1].timestamp)
        if current < following:
            violations.append(
                Violation(position=i + 1, item=items[i], next_item=items[i + 1])
            )
        current = following
    return violations
