"""
Shared fakes: a scripted extraction adapter, a fake browser page/session
driven by a scripted "user", and a recording sleep.
"""

import asyncio
import json
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

import pytest

from hn_sort_validator.config import RunConfig
from hn_sort_validator.services.bridge import RERUN_ENDPOINT, SETTINGS_ENDPOINT
from hn_sort_validator.types import Item, RawItem


BASE_TIME = datetime(2025, 1, 15, 12, 0, 0)


def ts(minutes_ago: int) -> str:
    return (BASE_TIME - timedelta(minutes=minutes_ago)).strftime("%Y-%m-%dT%H:%M:%S")


def raw(title: str, timestamp: Optional[str], age: str = "1 minute ago") -> RawItem:
    return {"title": title, "timestamp_raw": timestamp, "relative_age_text": age}


def make_pages(*sizes: int) -> List[List[RawItem]]:
    """Pages of rows with strictly decreasing timestamps across all pages."""
    pages = []
    counter = 0
    for size in sizes:
        page = []
        for _ in range(size):
            page.append(raw(f"Story {counter + 1}", ts(counter), f"{counter} minutes ago"))
            counter += 1
        pages.append(page)
    return pages


def make_items(*minutes_ago: int) -> List[Item]:
    return [Item(title=f"Story {i + 1}", timestamp=ts(m), relative_age_text="") for i, m in enumerate(minutes_ago)]


def make_config(**overrides: Any) -> RunConfig:
    values = {
        "target_count": 10,
        "source_url": "https://news.ycombinator.com/newest",
        "max_retries": 3,
        "retry_delay_ms": 2000,
        "navigation_timeout_ms": 15000,
        "report_path": "report.html",
    }
    values.update(overrides)
    return RunConfig(**values)


class FakeAdapter:
    """Serves scripted pages; navigation failures are raised in order."""

    def __init__(
        self,
        pages: List[List[RawItem]],
        nav_failures: Optional[List[Exception]] = None,
        open_failures: Optional[List[Exception]] = None,
    ):
        self.pages = pages
        self.nav_failures = list(nav_failures or [])
        self.open_failures = list(open_failures or [])
        self.index = 0
        self.calls: List[str] = []

    async def open(self, url: str, timeout_ms: int) -> None:
        self.calls.append("open")
        if self.open_failures:
            raise self.open_failures.pop(0)

    async def extract_current_page(self) -> List[RawItem]:
        self.calls.append(f"extract:{self.index}")
        if self.index < len(self.pages):
            return list(self.pages[self.index])
        return []

    async def has_next_page(self) -> bool:
        self.calls.append(f"has_next:{self.index}")
        return self.index + 1 < len(self.pages)

    async def next_page(self, timeout_ms: int) -> None:
        self.calls.append(f"next:{self.index}")
        if self.nav_failures:
            raise self.nav_failures.pop(0)
        self.index += 1


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


# ----------------------------------------------------------------------
# Fake browser
# ----------------------------------------------------------------------

UserAction = Callable[["FakePage"], None]


def submit(values: Dict[str, Any]) -> UserAction:
    def _act(page: "FakePage") -> None:
        page.replies.append(page.exposed[SETTINGS_ENDPOINT](json.dumps(values)))
    return _act


def click_rerun() -> UserAction:
    def _act(page: "FakePage") -> None:
        page.replies.append(page.exposed[RERUN_ENDPOINT]())
    return _act


def close_view() -> UserAction:
    def _act(page: "FakePage") -> None:
        page.mark_closed()
    return _act


class FakePage:
    def __init__(self, session: "FakeSession", number: int):
        self.session = session
        self.number = number
        self.exposed: Dict[str, Callable[..., Any]] = {}
        self.html: Optional[str] = None
        self.default_timeout: Optional[int] = None
        self.replies: List[Any] = []
        self.closed = False
        self._closed_event = asyncio.Event()

    async def expose_function(self, name: str, fn: Callable[..., Any]) -> None:
        self.exposed[name] = fn

    async def set_content(self, html: str) -> None:
        self.html = html
        self.session.rendered.append(html)
        actions = self.session.script.pop(0) if self.session.script else []
        loop = asyncio.get_running_loop()
        for action in actions:
            loop.call_soon(action, self)

    def set_default_timeout(self, timeout: int) -> None:
        self.default_timeout = timeout

    async def wait_for_event(self, event: str, timeout: Optional[float] = None) -> "FakePage":
        await self._closed_event.wait()
        return self

    def is_closed(self) -> bool:
        return self.closed

    def mark_closed(self) -> None:
        if not self.closed:
            self.closed = True
            self.session.events.append(f"close:{self.number}")
            self._closed_event.set()

    async def close(self) -> None:
        self.mark_closed()


class FakeSession:
    """Browser session whose views replay ``script``.

    ``script`` holds one list of user actions per rendered view (settings or
    report), consumed in order each time a view's content is set.
    """

    def __init__(self, script: Optional[List[List[UserAction]]] = None, start_error: Optional[Exception] = None):
        self.script = list(script or [])
        self.start_error = start_error
        self.views: List[FakePage] = []
        self.rendered: List[str] = []
        self.events: List[str] = []
        self.close_calls = 0

    async def start(self) -> None:
        self.events.append("start")
        if self.start_error is not None:
            raise self.start_error

    async def new_view(self) -> FakePage:
        page = FakePage(self, len(self.views))
        self.views.append(page)
        self.events.append(f"open:{page.number}")
        return page

    async def close(self) -> None:
        self.close_calls += 1
        self.events.append("session_close")


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()
