"""
Unit tests for the analysis session (detect -> track key -> suggest).

Run with: python -m pytest test/test_analysis_session.py
     or: python test/test_analysis_session.py
"""
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "src", "lib"))

from harmony_assist.analysis_session import AnalysisSession, Event
from harmony_assist.config import SessionOptions
from harmony_assist.modal_context import ModalEstimate

D_MINOR = [62, 65, 69]
G_MAJOR = [67, 71, 74]
C_MAJOR = [60, 64, 67]


class Recorder:
    """Collects (event, data) pairs from a session."""

    def __init__(self, session, *event_types):
        self.received = []
        for event_type in event_types:
            session.subscribe(event_type, self._callback_for(event_type))

    def _callback_for(self, event_type):
        def callback(data):
            self.received.append((event_type, data))

        return callback

    def types(self):
        return [event_type for event_type, _ in self.received]


class TestAnalysisSession:
    """Tests for AnalysisSession."""

    def test_chord_snapshot(self):
        session = AnalysisSession()
        snapshot = session.process_notes(C_MAJOR)
        assert snapshot.notes == [60, 64, 67]
        assert snapshot.chord == "C Major"
        assert snapshot.key == "C Major"
        assert snapshot.keys[0].root == "C"
        assert snapshot.intervals == []
        assert "C Major" not in [s.name for s in snapshot.diatonic]
        assert snapshot.extensions[0].name == "C Maj7"

    def test_two_five_one(self):
        session = AnalysisSession()
        session.process_notes(D_MINOR)
        session.process_notes(G_MAJOR)
        snapshot = session.process_notes(C_MAJOR)
        assert session.chord_history == ["D Minor", "G Major", "C Major"]
        assert snapshot.key == "C Major"
        assert snapshot.mode == ModalEstimate("C", "Ionian", 1.0)
        assert "C Major" not in [s.name for s in snapshot.next_chords]
        assert len(snapshot.modal_next) == 7

    def test_event_order(self):
        session = AnalysisSession()
        recorder = Recorder(
            session, Event.KEY_CHANGED, Event.CHORD_DETECTED, Event.SUGGESTIONS_UPDATED, Event.NOTES_CLEARED
        )
        session.process_notes(C_MAJOR)
        assert recorder.types() == [Event.KEY_CHANGED, Event.CHORD_DETECTED, Event.SUGGESTIONS_UPDATED]
        assert recorder.received[0][1]["key"] == "C Major"
        assert recorder.received[1][1]["chord"] == "C Major"
        assert "next_chords" in recorder.received[2][1]

    def test_key_changed_only_on_change(self):
        session = AnalysisSession()
        recorder = Recorder(session, Event.KEY_CHANGED)
        session.process_notes(D_MINOR)
        session.process_notes(G_MAJOR)
        session.process_notes(C_MAJOR)
        assert [data["key"] for _, data in recorder.received] == ["D Minor", "G Mixolydian", "C Major"]
        session.process_notes(C_MAJOR)
        assert len(recorder.received) == 3

    def test_repeated_chord_is_not_duplicated(self):
        session = AnalysisSession()
        session.process_notes(C_MAJOR)
        session.process_notes([48, 64, 67, 72])
        assert session.chord_history == ["C Major"]

    def test_partial_notes_suggest_intervals_and_keep_last_suggestions(self):
        session = AnalysisSession()
        chord_snapshot = session.process_notes(C_MAJOR)
        snapshot = session.process_notes([62])
        assert snapshot.chord == "C Major"
        assert [s.interval for s in snapshot.intervals] == ["+3", "+4", "+7", "+10", "+11"]
        assert snapshot.diatonic == chord_snapshot.diatonic

    def test_unknown_shape_suggests_nothing_new(self):
        session = AnalysisSession()
        snapshot = session.process_notes([60, 61, 62])
        assert snapshot.chord is None
        assert snapshot.intervals == []
        assert session.chord_history == []

    def test_notes_cleared(self):
        session = AnalysisSession()
        recorder = Recorder(session, Event.NOTES_CLEARED)
        session.process_notes(C_MAJOR)
        snapshot = session.process_notes([])
        assert recorder.received == [(Event.NOTES_CLEARED, {"chord": "C Major"})]
        assert snapshot.notes == []
        assert snapshot.chord == "C Major"

    def test_allow_repeat_option(self):
        session = AnalysisSession({"allow_repeat": True})
        snapshot = session.process_notes(C_MAJOR)
        assert "C Major" in [s.name for s in snapshot.next_chords]

    def test_key_history_option(self):
        session = AnalysisSession(SessionOptions(key_history=2))
        for notes in (D_MINOR, G_MAJOR, C_MAJOR):
            session.process_notes(notes)
        assert len(session.key_tracker) == 2

    def test_unsubscribe(self):
        session = AnalysisSession()
        received = []
        callback = received.append
        session.subscribe(Event.CHORD_DETECTED, callback)
        session.unsubscribe(Event.CHORD_DETECTED, callback)
        session.unsubscribe(Event.KEY_CHANGED, callback)
        session.process_notes(C_MAJOR)
        assert received == []

    def test_reset(self):
        session = AnalysisSession()
        session.process_notes(C_MAJOR)
        session.reset()
        snapshot = session.process_notes([60])
        assert snapshot.chord is None
        assert snapshot.key is None
        assert snapshot.mode is None
        assert snapshot.next_chords == []
        assert len(session.key_tracker) == 0


def run_tests():
    """Run all tests and report results."""
    from run_tests import run_test_classes

    return run_test_classes([TestAnalysisSession])


if __name__ == "__main__":
    sys.exit(0 if run_tests() else 1)
