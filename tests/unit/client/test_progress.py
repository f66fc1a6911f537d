"""Unit tests for the per-transfer progress state machine."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from app.client.errors import UploadError
from app.client.progress import InvalidTransitionError, ProgressListener, UploadTracker
from app.enums import ErrorKind, UploadPhase


class RecordingListener(ProgressListener):
    def __init__(self):
        self.progress = []
        self.successes = []
        self.errors = []

    def on_progress(self, progress):
        self.progress.append(progress)

    def on_success(self, result):
        self.successes.append(result)

    def on_error(self, kind, message):
        self.errors.append((kind, message))


def _transferring(listener=None) -> UploadTracker:
    tracker = UploadTracker(listener)
    tracker.signing()
    tracker.transferring()
    return tracker


class TestHappyPath:
    def test_direct_completion(self):
        listener = RecordingListener()
        tracker = _transferring(listener)
        tracker.report(50, 100)
        tracker.parsing()
        tracker.complete("asset")

        assert [p.phase for p in listener.progress] == [
            UploadPhase.SIGNING,
            UploadPhase.TRANSFERRING,
            UploadPhase.TRANSFERRING,
            UploadPhase.PARSING,
            UploadPhase.DONE,
        ]
        assert listener.progress[-1].percent == 100
        assert listener.successes == ["asset"]
        assert listener.errors == []
        assert tracker.is_terminal

    def test_persisting_before_done(self):
        tracker = _transferring()
        tracker.parsing()
        tracker.persisting()
        tracker.complete("record")

        assert tracker.phase == UploadPhase.DONE


class TestFailure:
    @pytest.mark.parametrize("steps", [0, 1, 2, 3, 4])
    def test_failed_reachable_from_every_non_terminal_phase(self, steps):
        listener = RecordingListener()
        tracker = UploadTracker(listener)
        for step in [tracker.signing, tracker.transferring, tracker.parsing, tracker.persisting][
            :steps
        ]:
            step()

        tracker.fail(UploadError(ErrorKind.NETWORK_ERROR, "Network error during upload"))

        assert tracker.phase == UploadPhase.FAILED
        assert listener.errors == [(ErrorKind.NETWORK_ERROR, "Network error during upload")]
        assert listener.successes == []

    def test_failure_keeps_percent(self):
        tracker = _transferring()
        tracker.report(30, 100)

        tracker.fail(UploadError(ErrorKind.TIMEOUT, "Upload timed out"))

        assert tracker.percent == 30

    def test_fail_after_terminal_is_ignored(self):
        listener = RecordingListener()
        tracker = _transferring(listener)
        tracker.parsing()
        tracker.complete("asset")

        tracker.fail(UploadError(ErrorKind.NETWORK_ERROR, "late"))

        assert tracker.phase == UploadPhase.DONE
        assert listener.errors == []


class TestInvalidTransitions:
    def test_cannot_skip_signing(self):
        with pytest.raises(InvalidTransitionError):
            UploadTracker().transferring()

    def test_cannot_leave_done(self):
        tracker = _transferring()
        tracker.parsing()
        tracker.complete(None)

        with pytest.raises(InvalidTransitionError):
            tracker.signing()

    def test_report_only_while_transferring(self):
        with pytest.raises(InvalidTransitionError):
            UploadTracker().report(1, 2)


class TestReport:
    def test_zero_total_is_complete(self):
        tracker = _transferring()
        tracker.report(0, 0)
        assert tracker.percent == 100

    def test_overshoot_is_clamped(self):
        tracker = _transferring()
        tracker.report(150, 100)
        assert tracker.percent == 100

    @given(
        reports=st.lists(
            st.tuples(st.integers(min_value=-10, max_value=2_000), st.integers(min_value=0, max_value=1_000)),
            max_size=30,
        )
    )
    def test_percent_is_monotonic_and_bounded(self, reports):
        listener = RecordingListener()
        tracker = _transferring(listener)

        for sent, total in reports:
            tracker.report(sent, total)

        percents = [p.percent for p in listener.progress]
        assert all(0 <= p <= 100 for p in percents)
        assert percents == sorted(percents)
