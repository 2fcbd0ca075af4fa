"""Background execution and busy guards for maccleaner.

Every scan, clean and docker command runs on a worker thread and hands its
result back as a Future. Each component owns a TaskGate; starting an
operation while the gate is running is rejected with BusyError rather than
queued.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import contextmanager
from enum import Enum
from typing import Any, Callable, Iterator, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")


class TaskState(str, Enum):
    """State of a component's busy gate."""

    IDLE = "idle"
    RUNNING = "running"


class BusyError(RuntimeError):
    """Raised when an operation is started while another is in flight."""


class TaskGate:
    """Idle/running state machine guarding one component."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._state = TaskState.IDLE
        self._lock = threading.Lock()

    @property
    def state(self) -> TaskState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._state == TaskState.RUNNING

    def acquire(self) -> None:
        """Move from idle to running, or raise BusyError."""
        with self._lock:
            if self._state == TaskState.RUNNING:
                raise BusyError(f"{self.name} is already running")
            self._state = TaskState.RUNNING

    def release(self) -> None:
        """Return to idle."""
        with self._lock:
            self._state = TaskState.IDLE

    @contextmanager
    def hold(self) -> Iterator[None]:
        """Hold the gate for the duration of a synchronous call."""
        self.acquire()
        try:
            yield
        finally:
            self.release()


class BackgroundRunner:
    """Thread pool that runs gated operations off the interactive path."""

    def __init__(self, max_workers: int = 4) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="maccleaner"
        )

    def submit(self, gate: TaskGate, fn: Callable[..., T], *args: Any, **kwargs: Any) -> "Future[T]":
        """
        Run fn on a worker while holding gate.

        The gate is acquired on the calling thread, so a busy component
        rejects the request immediately. It is released once fn returns or
        raises.
        """
        gate.acquire()
        log.debug("Dispatching %s to background worker", gate.name)

        def _run() -> T:
            try:
                return fn(*args, **kwargs)
            finally:
                gate.release()

        try:
            return self._executor.submit(_run)
        except RuntimeError:
            gate.release()
            raise

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "BackgroundRunner":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


_default_runner: BackgroundRunner | None = None
_default_lock = threading.Lock()


def get_default_runner() -> BackgroundRunner:
    """Shared runner used by components that are not given one."""
    global _default_runner
    with _default_lock:
        if _default_runner is None:
            _default_runner = BackgroundRunner()
        return _default_runner
