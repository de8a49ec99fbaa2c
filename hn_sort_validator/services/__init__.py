from .bridge import RERUN_ENDPOINT, SETTINGS_ENDPOINT, BridgeChannel
from .collector import advance, collect
from .lifecycle import RunLifecycle
from .validator import parse_timestamp, validate_sort_order

__all__ = [
    "BridgeChannel",
    "RERUN_ENDPOINT",
    "SETTINGS_ENDPOINT",
    "RunLifecycle",
    "advance",
    "collect",
    "parse_timestamp",
    "validate_sort_order",
]
