"""
Host <-> front-end request/response bridge.

The front-end calls a global function exposed on its page (for example
``window.__onSettingsSubmit(json)``). The host side keeps one single-use
future per endpoint; a delivery resolves it, and whoever awaits the future
gets the parsed payload.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from ..exceptions import BridgeError


logger = logging.getLogger(__name__)

SETTINGS_ENDPOINT = "__onSettingsSubmit"
RERUN_ENDPOINT = "__onRerun"

Parser = Callable[[Any], Any]


class BridgeChannel:
    """Registry of pending one-shot futures keyed by endpoint name."""

    def __init__(self) -> None:
        self._pending: Dict[str, asyncio.Future] = {}
        self._parsers: Dict[str, Optional[Parser]] = {}

    def register(self, endpoint: str, parser: Optional[Parser] = None) -> asyncio.Future:
        existing = self._pending.get(endpoint)
        if existing is not None and not existing.done():
            raise BridgeError(f"Endpoint {endpoint} already has a pending request")
        future = asyncio.get_running_loop().create_future()
        self._pending[endpoint] = future
        self._parsers[endpoint] = parser
        return future

    def is_pending(self, endpoint: str) -> bool:
        future = self._pending.get(endpoint)
        return future is not None and not future.done()

    def deliver(self, endpoint: str, payload: Any = None) -> Dict[str, Any]:
        """Front-end entry point. The return value is handed back to the page."""
        future = self._pending.get(endpoint)
        if future is None or future.done():
            logger.warning(f"⚠️ Ignoring delivery to {endpoint}: nothing is waiting for it")
            return {"ok": False, "errors": ["No pending request"]}

        try:
            data = json.loads(payload) if isinstance(payload, (str, bytes)) else payload
            parser = self._parsers.get(endpoint)
            value = parser(data) if parser is not None else data
        except (ValueError, TypeError) as exc:
            # Bad submission: let the user fix the form, keep waiting
            logger.warning(f"⚠️ Rejected payload on {endpoint}: {exc}")
            return {"ok": False, "errors": _error_messages(exc)}

        future.set_result(value)
        del self._pending[endpoint]
        self._parsers.pop(endpoint, None)
        return {"ok": True}

    def discard(self, endpoint: str) -> None:
        future = self._pending.pop(endpoint, None)
        self._parsers.pop(endpoint, None)
        if future is not None and not future.done():
            future.cancel()

    def discard_all(self) -> None:
        for endpoint in list(self._pending):
            self.discard(endpoint)

    async def bind(self, page: Any, endpoint: str, parser: Optional[Parser] = None) -> asyncio.Future:
        """Register ``endpoint`` and expose it on ``page`` as a global function."""
        future = self.register(endpoint, parser)

        def _handler(payload: Any = None) -> Dict[str, Any]:
            return self.deliver(endpoint, payload)

        await page.expose_function(endpoint, _handler)
        return future


def _error_messages(exc: Exception) -> list:
    # pydantic.ValidationError is a ValueError with structured errors()
    if isinstance(exc, ValidationError):
        return [
            f"{'.'.join(str(p) for p in err.get('loc', ())) or 'payload'}: {err.get('msg')}"
            for err in exc.errors()
        ]
    return [str(exc)]
