"""Progress reporting for single file transfers.

Each transfer gets its own UploadTracker, which walks the phase state
machine and forwards snapshots to a ProgressListener:

    idle -> signing -> transferring -> parsing -> done
                                              -> persisting -> done

`failed` can be entered from any non-terminal phase. `done` and `failed` are
terminal. Reported percentages never go down and stay within [0, 100].
"""

from __future__ import annotations

import logging
from typing import Any

from app.client.errors import UploadError
from app.enums import ErrorKind, UploadPhase
from app.models.domain import UploadProgress

logger = logging.getLogger(__name__)


_TRANSITIONS: dict[UploadPhase, frozenset[UploadPhase]] = {
    UploadPhase.IDLE: frozenset({UploadPhase.SIGNING, UploadPhase.FAILED}),
    UploadPhase.SIGNING: frozenset({UploadPhase.TRANSFERRING, UploadPhase.FAILED}),
    UploadPhase.TRANSFERRING: frozenset({UploadPhase.PARSING, UploadPhase.FAILED}),
    UploadPhase.PARSING: frozenset(
        {UploadPhase.DONE, UploadPhase.PERSISTING, UploadPhase.FAILED}
    ),
    UploadPhase.PERSISTING: frozenset({UploadPhase.DONE, UploadPhase.FAILED}),
    UploadPhase.DONE: frozenset(),
    UploadPhase.FAILED: frozenset(),
}

TERMINAL_PHASES = frozenset({UploadPhase.DONE, UploadPhase.FAILED})


class InvalidTransitionError(Exception):
    """Raised when a tracker is moved along an edge the state machine lacks."""

    pass


class ProgressListener:
    """Receives progress and the terminal outcome of one transfer.

    Subclass and override what you need; the base class ignores everything,
    so it doubles as the no-op listener.
    """

    def on_progress(self, progress: UploadProgress) -> None:
        pass

    def on_success(self, result: Any) -> None:
        pass

    def on_error(self, kind: ErrorKind, message: str) -> None:
        pass


class UploadTracker:
    """State machine and progress stream for one transfer."""

    def __init__(self, listener: ProgressListener | None = None) -> None:
        self._listener = listener or ProgressListener()
        self._phase = UploadPhase.IDLE
        self._percent = 0.0

    @property
    def phase(self) -> UploadPhase:
        return self._phase

    @property
    def percent(self) -> float:
        return self._percent

    @property
    def is_terminal(self) -> bool:
        return self._phase in TERMINAL_PHASES

    def snapshot(self) -> UploadProgress:
        return UploadProgress(percent=self._percent, phase=self._phase)

    def _move(self, phase: UploadPhase) -> None:
        if phase not in _TRANSITIONS[self._phase]:
            raise InvalidTransitionError(f"Cannot move from {self._phase} to {phase}")
        logger.debug("Upload phase %s -> %s", self._phase, phase)
        self._phase = phase

    def _emit(self) -> None:
        self._listener.on_progress(self.snapshot())

    def signing(self) -> None:
        self._move(UploadPhase.SIGNING)
        self._emit()

    def transferring(self) -> None:
        self._move(UploadPhase.TRANSFERRING)
        self._emit()

    def report(self, bytes_sent: int, total_bytes: int) -> None:
        """Record transfer progress as bytes_sent / total_bytes * 100."""
        if self._phase != UploadPhase.TRANSFERRING:
            raise InvalidTransitionError(f"Cannot report progress while {self._phase}")
        if total_bytes <= 0:
            percent = 100.0
        else:
            percent = bytes_sent * 100.0 / total_bytes
        percent = min(max(percent, 0.0), 100.0)
        if percent < self._percent:
            return
        self._percent = percent
        self._emit()

    def parsing(self) -> None:
        self._move(UploadPhase.PARSING)
        self._emit()

    def persisting(self) -> None:
        self._move(UploadPhase.PERSISTING)
        self._emit()

    def complete(self, result: Any) -> None:
        """Enter `done` at 100% and hand the result to the listener."""
        self._move(UploadPhase.DONE)
        self._percent = 100.0
        self._emit()
        self._listener.on_success(result)

    def fail(self, error: UploadError) -> None:
        """Enter `failed`, keeping the percent where the transfer halted.

        A tracker that already reached a terminal phase is left alone.
        """
        if self.is_terminal:
            return
        self._move(UploadPhase.FAILED)
        self._emit()
        self._listener.on_error(error.kind, error.message)
