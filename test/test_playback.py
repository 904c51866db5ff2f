"""
Unit tests for the playback schedule.

Run with: python -m pytest test/test_playback.py
     or: python test/test_playback.py
"""
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "src", "lib"))

from harmony_assist.playback import (
    NOTE_OFF,
    NOTE_ON,
    PlaybackEvent,
    build_playback_schedule,
    playback_octave,
    schedule_duration_ms,
    to_mido_messages,
)


class TestPlaybackSchedule:
    """Tests for build_playback_schedule."""

    def test_single_chord(self):
        events = build_playback_schedule(["C Major"])
        assert events == [
            PlaybackEvent(0.0, NOTE_ON, 60, 96),
            PlaybackEvent(5.0, NOTE_ON, 64, 96),
            PlaybackEvent(10.0, NOTE_ON, 67, 96),
            PlaybackEvent(1000.0, NOTE_OFF, 60, 64),
            PlaybackEvent(1000.0, NOTE_OFF, 64, 64),
            PlaybackEvent(1000.0, NOTE_OFF, 67, 64),
        ]

    def test_chords_follow_each_other(self):
        events = build_playback_schedule(["C Major", "G Major"], bpm=60, beats_per_chord=1)
        ons = [e for e in events if e.kind == NOTE_ON]
        assert [e.time_ms for e in ons] == [0.0, 5.0, 10.0, 1000.0, 1005.0, 1010.0]
        # the first chord is released before the second starts
        at_boundary = [e.kind for e in events if e.time_ms == 1000.0]
        assert at_boundary == [NOTE_OFF, NOTE_OFF, NOTE_OFF, NOTE_ON]

    def test_sorted_by_time(self):
        times = [e.time_ms for e in build_playback_schedule(["C Maj7", "A Min7", "D Min7", "G Dom7"])]
        assert times == sorted(times)

    def test_register_octaves(self):
        assert playback_octave(None) == 4
        assert playback_octave("Bass") == 2
        assert playback_octave("Harmony") == 5
        events = build_playback_schedule(["C Major"], register="Harmony")
        assert events[0].note == 72

    def test_unresolvable_chord_keeps_its_slot(self):
        events = build_playback_schedule(["X Foo", "C Major"])
        assert events[0].time_ms == 1000.0
        assert len(events) == 6

    def test_empty_or_invalid(self):
        assert build_playback_schedule([]) == []
        assert build_playback_schedule(None) == []
        assert build_playback_schedule(["C Major"], bpm=0) == []

    def test_duration(self):
        assert schedule_duration_ms(["C Major", "G Major"]) == 2000.0
        assert schedule_duration_ms(["C Major"], bpm=60, beats_per_chord=4) == 4000.0
        assert schedule_duration_ms([]) == 0.0


class TestMidoMessages:
    """Tests for to_mido_messages."""

    def test_messages(self):
        pairs = to_mido_messages(build_playback_schedule(["C Major"]), channel=2)
        assert len(pairs) == 6
        time_ms, first = pairs[0]
        assert time_ms == 0.0
        assert first.type == "note_on"
        assert first.note == 60
        assert first.velocity == 96
        assert first.channel == 2
        _, last = pairs[-1]
        assert last.type == "note_off"
        assert last.velocity == 64


def run_tests():
    """Run all tests and report results."""
    from run_tests import run_test_classes

    return run_test_classes([TestPlaybackSchedule, TestMidoMessages])


if __name__ == "__main__":
    sys.exit(0 if run_tests() else 1)
