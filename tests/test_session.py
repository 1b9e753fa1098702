"""
Tests for PointerTracker and GestureSession.
"""

import pytest

from algorithms.gestures.session import GestureSession, PointerTracker
from models.config import GestureConfig
from models.gesture import DragEvent, Intent, IntentKind, NO_INTENT


class TestPointerTracker:
    def test_down_starts_gesture(self):
        tracker = PointerTracker()
        event = tracker.down(100, 200, t=0)

        assert event.first is True
        assert event.active is True
        assert event.last is False
        assert event.movement == (0.0, 0.0)
        assert tracker.in_progress

    def test_move_reports_movement_and_velocity(self):
        tracker = PointerTracker()
        tracker.down(100, 200, t=0)
        tracker.move(100, 180, t=10)
        event = tracker.move(100, 150, t=20)

        assert event.movement == (0.0, -50.0)
        assert event.velocity == (0.0, -3.0)
        assert event.active is True
        assert event.first is False

    def test_up_ends_gesture(self):
        tracker = PointerTracker()
        tracker.down(0, 0, t=0)
        tracker.move(-100, 0, t=100)
        event = tracker.up(-160, 0, t=200)

        assert event.last is True
        assert event.active is False
        assert event.movement == (-160.0, 0.0)
        assert event.velocity == pytest.approx((-0.6, 0.0))
        assert event.tap is False
        assert not tracker.in_progress

    def test_same_timestamp_keeps_velocity(self):
        tracker = PointerTracker()
        tracker.down(0, 0, t=0)
        tracker.move(0, 20, t=10)
        event = tracker.up(0, 30, t=10)

        assert event.velocity == (0.0, 2.0)

    def test_short_still_press_is_tap(self):
        tracker = PointerTracker(GestureConfig(tap_threshold=5, tap_max_duration_ms=250))
        tracker.down(10, 10, t=0)
        event = tracker.up(12, 11, t=100)

        assert event.tap is True

    def test_long_press_is_not_tap(self):
        tracker = PointerTracker(GestureConfig(tap_threshold=5, tap_max_duration_ms=250))
        tracker.down(10, 10, t=0)
        event = tracker.up(10, 10, t=600)

        assert event.tap is False

    def test_moved_press_is_not_tap(self):
        tracker = PointerTracker()
        tracker.down(10, 10, t=0)
        event = tracker.up(10, 16, t=50)

        assert event.tap is False

    def test_orphan_samples_ignored(self):
        tracker = PointerTracker()
        assert tracker.move(1, 1, t=1) is None
        assert tracker.up(1, 1, t=2) is None
        assert tracker.cancel() is None

    def test_cancel_is_last_without_tap(self):
        tracker = PointerTracker()
        tracker.down(0, 0, t=0)
        event = tracker.cancel()

        assert event.last is True
        assert event.tap is False

    def test_exclusion_carried_through_gesture(self):
        tracker = PointerTracker()
        tracker.down(0, 0, t=0, excluded=True)
        assert tracker.move(0, -50, t=10).target_excluded is True
        assert tracker.up(0, -80, t=20).target_excluded is True

    def test_handle_dispatches_phase(self):
        tracker = PointerTracker()
        assert tracker.handle("down", 0, 0, 0).first is True
        assert tracker.handle("move", 0, 5, 5).active is True
        assert tracker.handle("up", 0, 5, 6).last is True

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_samples_ignored(self, bad):
        tracker = PointerTracker()
        assert tracker.down(bad, 0, t=0) is None
        assert not tracker.in_progress

        tracker.down(0, 0, t=0)
        assert tracker.move(0, bad, t=10) is None
        assert tracker.up(0, -80, t=bad) is None
        assert tracker.in_progress

        event = tracker.up(0, -80, t=20)
        assert event.movement == (0.0, -80.0)
        assert event.is_finite

    def test_handle_rejects_unknown_phase(self):
        with pytest.raises(ValueError):
            PointerTracker().handle("hover", 0, 0, 0)


def _event(dy=0.0, dx=0.0, vx=0.0, first=False, last=False, tap=False, excluded=False):
    return DragEvent(
        movement=(dx, dy),
        velocity=(vx, 0.0),
        active=not last,
        last=last,
        first=first,
        tap=tap,
        target_excluded=excluded,
    )


class TestGestureSession:
    def test_gesture_ids_increase(self):
        session = GestureSession()
        session.process(_event(first=True))
        session.process(_event(dy=-100, last=True))
        assert session.gesture_id == 1

        session.process(_event(first=True))
        assert session.gesture_id == 2

    def test_start_callback(self):
        started = []
        session = GestureSession(on_gesture_start=started.append)
        session.process(_event(first=True))
        session.process(_event(dy=-20))
        session.process(_event(dy=-60, last=True))
        session.process(_event(first=True))

        assert started == [1, 2]

    def test_event_without_open_gesture_starts_one(self):
        session = GestureSession()
        intent = session.process(_event(dy=-120, last=True))
        assert intent == Intent.increment(1)
        assert session.gesture_id == 1
        assert not session.is_open

    def test_excluded_start_suppresses_whole_gesture(self):
        session = GestureSession()
        assert session.process(_event(first=True, excluded=True)) == NO_INTENT
        # Later events of the same gesture no longer carry the flag
        assert session.process(_event(dy=-60)) == NO_INTENT
        assert session.process(_event(dy=-200, last=True)) == NO_INTENT

        # Next gesture is processed normally
        session.process(_event(first=True))
        assert session.process(_event(dy=-200, last=True)).kind is IntentKind.INCREMENT

    def test_modal_open_suppresses_rest_of_gesture(self):
        session = GestureSession()
        session.process(_event(first=True), modal_open=True)
        assert session.process(_event(dy=-200, last=True), modal_open=False) == NO_INTENT

    def test_predicate_suppression_latched(self):
        calls = []

        def excluded(event):
            calls.append(event)
            return event.first

        session = GestureSession(is_excluded=excluded)
        session.process(_event(first=True))
        assert session.process(_event(dy=-200, last=True)) == NO_INTENT

    def test_tap_emits_once_per_gesture(self):
        session = GestureSession()
        session.process(_event(first=True))
        assert session.process(_event(tap=True)) == Intent.increment(1)
        assert session.process(_event(tap=True, last=True)) == NO_INTENT

    def test_hint_then_commit(self):
        session = GestureSession()
        session.process(_event(first=True))
        hint = session.process(_event(dy=-30))
        commit = session.process(_event(dy=-120, last=True))

        assert hint.kind is IntentKind.FEEDBACK_HINT
        assert commit == Intent.increment(1)

    def test_malformed_event_does_not_open_gesture(self):
        session = GestureSession()
        assert session.process({"movement": "bad"}) == NO_INTENT
        assert session.gesture_id == 0

    def test_reset_closes_gesture(self):
        session = GestureSession()
        session.process(_event(first=True, excluded=True))
        session.reset()
        assert not session.is_open
        assert not session.is_latched

    def test_non_finite_event_does_not_open_gesture(self):
        session = GestureSession()
        event = DragEvent(movement=(0.0, float("nan")), last=True)
        assert session.process(event) == NO_INTENT
        assert session.gesture_id == 0
