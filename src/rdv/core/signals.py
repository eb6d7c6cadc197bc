"""Interrupt handling for the render pipeline.

SIGINT already surfaces as KeyboardInterrupt (and cancels the running
asyncio task). SIGTERM gets the same treatment while the guard is active,
so `finally` blocks and context managers (snapshot cleanup) run for both.
"""

from __future__ import annotations

import signal
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from types import FrameType

from rdv.core.logging import get_logger

log = get_logger("signals")


def _raise_interrupt(signum: int, _frame: FrameType | None) -> None:
    log.debug("signal_received", signal=signal.Signals(signum).name)
    raise KeyboardInterrupt


@contextmanager
def interrupt_guard() -> Iterator[None]:
    """Map SIGTERM to KeyboardInterrupt for the duration of the block.

    Signal handlers can only be installed from the main thread; elsewhere
    the guard is a no-op.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    previous = signal.signal(signal.SIGTERM, _raise_interrupt)
    try:
        yield
    finally:
        signal.signal(signal.SIGTERM, previous)
