"""Deferral of interrupt signals around critical sections.

A move plus its index update must never be cut in half by Ctrl-C. Inside
deferred_interrupts() SIGINT and SIGTERM are recorded instead of acting;
once the block finishes the interrupt is re-raised as KeyboardInterrupt.
"""

import logging
import signal
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from types import FrameType

logger = logging.getLogger(__name__)

DEFERRED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


@contextmanager
def deferred_interrupts() -> Iterator[None]:
    """Postpone SIGINT/SIGTERM until the block completes.

    Signal handlers can only be installed from the main thread; elsewhere
    the block runs unprotected.

    Raises:
        KeyboardInterrupt: After the block, if a signal arrived during it.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    received: list[int] = []

    def _record(signum: int, frame: FrameType | None) -> None:
        received.append(signum)
        logger.warning("Interrupt received, finishing the current move before exiting")

    previous = {sig: signal.signal(sig, _record) for sig in DEFERRED_SIGNALS}
    try:
        yield
    finally:
        for sig, handler in previous.items():
            if handler is not None:
                signal.signal(sig, handler)

    if received:
        raise KeyboardInterrupt
