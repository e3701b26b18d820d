# Services module - provider client and queue logic
from .codeship import CodeshipClient
from .queue import WaitOutcome, WaitSequencer, build_watch_set, order_by_allocation, wait_for_turn

__all__ = [
    "CodeshipClient",
    "WaitOutcome",
    "WaitSequencer",
    "build_watch_set",
    "order_by_allocation",
    "wait_for_turn",
]
