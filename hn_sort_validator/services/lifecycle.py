"""
Run lifecycle state machine.

CONFIGURING -> COLLECTING -> REPORTING -> (CONFIGURING | TERMINATED)

Each phase works in its own browser view, opened on entry and closed before
the next phase starts. The browser session is released exactly once, after
the loop, whichever way it ended.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

from ..adapters.registry import get_adapter_for
from ..config import ConfigStore, RunConfig
from ..exceptions import (
    CollectionShortfallError,
    LifecycleFatalError,
    MalformedTimestampError,
    NavigationError,
)
from ..types import LifecyclePhase, RunResult, Violation
from .bridge import RERUN_ENDPOINT, SETTINGS_ENDPOINT, BridgeChannel
from .collector import advance, collect
from .report import build_report_payload, format_console_report, render_report_html, save_report
from .validator import validate_sort_order
from .views import render_settings_html


logger = logging.getLogger(__name__)


def _rerun_signal(_payload: Any) -> bool:
    return True


class RunLifecycle:
    """
    Orchestrates configure -> collect/validate -> report -> repeat-or-exit.

    Args:
        session: Browser session exposing start(), new_view() and close()
        store: Config store; its active value seeds every settings view
        bridge: Host/front-end bridge used by the settings and report views
        adapter_for: Maps a listing URL to an extraction adapter factory
        interactive: When False, skip the settings/report views and run once
        clock: Monotonic clock in seconds
        sleep: Awaitable sleep used between navigation retries
    """

    def __init__(
        self,
        session: Any,
        store: ConfigStore,
        bridge: Optional[BridgeChannel] = None,
        adapter_for: Callable[[str], Callable[[Any], Any]] = get_adapter_for,
        interactive: bool = True,
        title: str = "Hacker News Sort Validator",
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._session = session
        self._store = store
        self._bridge = bridge or BridgeChannel()
        self._adapter_for = adapter_for
        self._interactive = interactive
        self._title = title
        self._clock = clock
        self._sleep = sleep

        self.phase: Optional[LifecyclePhase] = None
        self.phase_history: List[LifecyclePhase] = []
        self.last_result: Optional[RunResult] = None
        self.fatal_error: Optional[Exception] = None
        self.runs_completed = 0
        self._failed = False  # sticky across iterations

        self._handlers: Dict[LifecyclePhase, Callable[[], Awaitable[LifecyclePhase]]] = {
            LifecyclePhase.CONFIGURING: self._configure,
            LifecyclePhase.COLLECTING: self._collect,
            LifecyclePhase.REPORTING: self._report,
        }

    @property
    def exit_code(self) -> int:
        if self.fatal_error is not None or self._failed:
            return 1
        return 0

    async def run(self) -> int:
        """Drive the loop until TERMINATED; returns the process exit status."""
        try:
            await self._session.start()
            phase = LifecyclePhase.CONFIGURING
            while phase is not LifecyclePhase.TERMINATED:
                self._enter(phase)
                phase = await self._handlers[phase]()
        except (LifecycleFatalError, NavigationError) as exc:
            logger.error(f"❌ ERROR: {exc}")
            self.fatal_error = exc
        except Exception as exc:
            where = self.phase.value if self.phase else "startup"
            fatal = LifecycleFatalError(f"Lifecycle aborted while {where}: {exc}")
            fatal.__cause__ = exc
            logger.error(f"❌ ERROR: {fatal}")
            self.fatal_error = fatal
        finally:
            self._bridge.discard_all()
            await self._session.close()
            self._enter(LifecyclePhase.TERMINATED)
        return self.exit_code

    def _enter(self, phase: LifecyclePhase) -> None:
        self.phase = phase
        self.phase_history.append(phase)
        logger.debug(f"Lifecycle phase -> {phase.value}")

    # ------------------------------------------------------------------
    # CONFIGURING
    # ------------------------------------------------------------------

    async def _configure(self) -> LifecyclePhase:
        if not self._interactive:
            logger.info("Non-interactive mode, using the active config.")
            return LifecyclePhase.COLLECTING

        view = await self._session.new_view()
        try:
            submission = await self._bridge.bind(view, SETTINGS_ENDPOINT, self._store.parse_submission)
            await view.set_content(
                render_settings_html(self._store.active, self._store.defaults, title=self._title)
            )
            logger.info("Settings UI loaded, waiting for user input.")
            config = await self._first_of(submission, view)
        finally:
            self._bridge.discard(SETTINGS_ENDPOINT)
            await self._close_view(view)

        if config is None:
            logger.info("Settings view closed, exiting.")
            return LifecyclePhase.TERMINATED

        self._store.replace(config)
        logger.info("Settings received, starting validation.")
        logger.info(f"  Config: {config.to_wire()}")
        return LifecyclePhase.COLLECTING

    # ------------------------------------------------------------------
    # COLLECTING
    # ------------------------------------------------------------------

    async def _collect(self) -> LifecyclePhase:
        config = self._store.active
        try:
            self.last_result = await self.execute_run(config)
        except (LifecycleFatalError, NavigationError):
            raise
        except Exception as exc:
            raise LifecycleFatalError(f"Validation run aborted: {exc}") from exc
        if not self.last_result.passed:
            self._failed = True
        self.runs_completed += 1
        return LifecyclePhase.REPORTING

    async def execute_run(self, config: RunConfig) -> RunResult:
        """Collect then validate; collection shortfalls come back as a failed result."""
        started = self._clock()
        view = await self._session.new_view()
        try:
            view.set_default_timeout(config.navigation_timeout_ms)
            adapter = self._adapter_for(config.source_url)(view)

            logger.info(f"Navigating to {config.source_url}")
            await advance(
                lambda: adapter.open(config.source_url, config.navigation_timeout_ms),
                config,
                sleep=self._sleep,
            )
            collection = await collect(adapter, config, sleep=self._sleep)
        finally:
            await self._close_view(view)
        duration_ms = max(0.0, (self._clock() - started) * 1000)

        error: Optional[Exception] = None
        violations: List[Violation] = []
        try:
            violations = validate_sort_order(collection.items)
        except MalformedTimestampError as exc:
            logger.error(f"❌ ERROR: {exc}")
            error = exc

        if error is None and not collection.quota_met:
            error = CollectionShortfallError(
                len(collection.items), collection.target_count, collection.stop_reason.value
            )
            logger.error(f"❌ ERROR: {error}")

        return RunResult(
            items=collection.items,
            violations=violations,
            duration_ms=duration_ms,
            success=error is None,
            config=config,
            collection=collection,
            error=error,
        )

    # ------------------------------------------------------------------
    # REPORTING
    # ------------------------------------------------------------------

    async def _report(self) -> LifecyclePhase:
        result = self.last_result
        print("\n" + format_console_report(result) + "\n")

        html = render_report_html(build_report_payload(result))
        save_report(html, result.config.report_path)

        if not self._interactive:
            return LifecyclePhase.TERMINATED

        view = await self._session.new_view()
        try:
            rerun = await self._bridge.bind(view, RERUN_ENDPOINT, _rerun_signal)
            await view.set_content(html)
            logger.info("Report displayed, click 'Run Again' or close the tab to exit.")
            signal = await self._first_of(rerun, view)
        finally:
            self._bridge.discard(RERUN_ENDPOINT)
            await self._close_view(view)

        if signal is None:
            logger.info("Report view closed, exiting.")
            return LifecyclePhase.TERMINATED
        return LifecyclePhase.CONFIGURING

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    async def _first_of(self, signal: asyncio.Future, view: Any) -> Any:
        """Race a bridge signal against the view closing.

        Returns the signal's value, or None when the view closed first.
        """
        closed = asyncio.ensure_future(view.wait_for_event("close", timeout=0))
        done, pending = await asyncio.wait({signal, closed}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()

        if closed in done and not closed.cancelled() and closed.exception() is not None:
            logger.debug(f"Close watcher ended with: {closed.exception()}")

        if signal in done and not signal.cancelled():
            return signal.result()
        return None

    async def _close_view(self, view: Any) -> None:
        if view.is_closed():
            return
        try:
            await view.close()
        except Exception as exc:  # noqa: BLE001
            logger.debug(f"View close failed: {exc}")
