"""
Error taxonomy for collection, validation and the run lifecycle.
"""

from __future__ import annotations

from typing import Optional


class ValidatorError(Exception):
    """Base class for every error raised by the validator."""


class NavigationError(ValidatorError):
    """A navigation kept failing until the retry budget was spent."""

    def __init__(self, attempts: int, last_error: Optional[BaseException] = None):
        self.attempts = attempts
        self.last_error = last_error
        detail = f": {last_error}" if last_error is not None else ""
        super().__init__(f"Navigation failed after {attempts} attempt(s){detail}")


class CollectionShortfallError(ValidatorError):
    """Collection stopped before reaching the target count.

    Never raised by collection itself. An instance is attached to the failed
    RunResult so the reporting phase can explain what happened.
    """

    def __init__(self, collected: int, target: int, stop_reason: str):
        self.collected = collected
        self.target = target
        self.stop_reason = stop_reason
        super().__init__(
            f"Only collected {collected}/{target} items (stopped: {stop_reason})"
        )


class MalformedTimestampError(ValidatorError):
    """A timestamp could not be parsed as an ISO-8601 instant."""

    def __init__(self, value: Optional[str]):
        self.value = value
        super().__init__(f"Malformed timestamp: {value!r}")


class LifecycleFatalError(ValidatorError):
    """Anything that prevents the lifecycle from ever reaching REPORTING."""


class BridgeError(ValidatorError):
    """Misuse of the host/front-end bridge (e.g. double registration)."""
