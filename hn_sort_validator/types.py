"""
Type definitions for the sort validator
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, TypedDict

if TYPE_CHECKING:
    from .config import RunConfig


class LifecyclePhase(str, Enum):
    """Phases of the run lifecycle state machine"""
    CONFIGURING = "configuring"
    COLLECTING = "collecting"
    REPORTING = "reporting"
    TERMINATED = "terminated"


class StopReason(str, Enum):
    """Why a collection loop ended"""
    QUOTA_MET = "quota_met"
    EMPTY_PAGE = "empty_page"  # a page yielded no rows at all
    NO_NEXT_PAGE = "no_next_page"  # pagination exhausted


class RawItem(TypedDict):
    """One row as returned by an extraction adapter"""
    title: str
    timestamp_raw: Optional[str]
    relative_age_text: str


@dataclass(frozen=True)
class Item:
    """A single listing entry"""
    title: str
    timestamp: Optional[str]
    relative_age_text: str = ""


@dataclass(frozen=True)
class Violation:
    """Adjacent pair where the first item is older than the one after it"""
    position: int  # 1-based index of `item`
    item: Item
    next_item: Item


@dataclass
class CollectionResult:
    items: List[Item]
    target_count: int
    stop_reason: StopReason
    pages_visited: int = 0
    dropped_count: int = 0

    @property
    def quota_met(self) -> bool:
        return len(self.items) >= self.target_count


@dataclass
class RunResult:
    """Outcome of one COLLECTING phase, carried into REPORTING"""
    items: List[Item]
    violations: List[Violation]
    duration_ms: float
    success: bool
    config: Optional["RunConfig"] = None
    collection: Optional[CollectionResult] = None
    error: Optional[Exception] = None

    @property
    def passed(self) -> bool:
        return self.success and not self.violations
