"""Runs a sequence of steps, optionally on a background thread."""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from typing import Any, Optional

STEP_FAILED_MESSAGE = "A step returned false – aborting"


class StepFailed(RuntimeError):
    """Raised when a scheduled step returns ``False``."""


class Worker:
    """Runs scheduled callables in order and reports the outcome.

    A step returning ``False`` aborts the run. Any exception raised by a step
    is reported through ``on_error`` with its message; a complete run calls
    ``on_finished``.
    """

    def __init__(
        self,
        on_finished: Optional[Callable[[], Any]] = None,
        on_error: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self._on_finished = on_finished
        self._on_error = on_error
        self._steps: Optional[Sequence[Callable[[], Any]]] = None
        self._lock = threading.Lock()

    def schedule(self, *args: Callable[[], Any]) -> None:
        """Replace the scheduled steps with ``args``."""
        for step in args:
            if not callable(step):
                raise TypeError(f"scheduled step {step!r} is not callable")
        with self._lock:
            self._steps = tuple(args)

    def run_scheduled(self) -> bool:
        """Run the scheduled steps once; return True if all of them succeeded."""
        with self._lock:
            steps, self._steps = self._steps, None
        if steps is None:
            return False
        try:
            for step in steps:
                if step() is False:
                    raise StepFailed(STEP_FAILED_MESSAGE)
        except Exception as exc:  # noqa: BLE001 - every failure is reported
            if self._on_error is not None:
                self._on_error(str(exc))
            return False
        if self._on_finished is not None:
            self._on_finished()
        return True

    def start(self) -> threading.Thread:
        """Run the scheduled steps on a new daemon thread and return it."""
        thread = threading.Thread(target=self.run_scheduled, daemon=True)
        thread.start()
        return thread