"""
Unit tests for chord detection from held MIDI notes.

Run with: python -m pytest test/test_chord_detector.py
     or: python test/test_chord_detector.py
"""
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "src", "lib"))

from harmony_assist.chord_detector import active_pitch_classes, detect_chord
from harmony_assist.music_theory import CHORD_TYPES


class TestDetectChord:
    """Tests for detect_chord."""

    def test_major_triad(self):
        assert detect_chord([60, 64, 67]) == "C Major"

    def test_seventh_chords(self):
        assert detect_chord([60, 64, 67, 71]) == "C Maj7"
        assert detect_chord([67, 71, 74, 77]) == "G Dom7"
        assert detect_chord([60, 63, 66, 69]) == "C Dim7"

    def test_diminished_triad(self):
        assert detect_chord([71, 74, 77]) == "B Diminished"

    def test_inversions_name_the_same_chord(self):
        assert detect_chord([64, 67, 72]) == "C Major"
        assert detect_chord([67, 72, 76]) == "C Major"

    def test_octave_spread_and_doubling(self):
        assert detect_chord([48, 76, 67]) == "C Major"
        assert detect_chord([60, 64, 67, 72]) == "C Major"
        assert detect_chord([36, 48, 60, 64, 67]) == "C Major"

    def test_transposition(self):
        assert detect_chord([62, 65, 69]) == "D Minor"
        assert detect_chord([74, 77, 81]) == "D Minor"

    def test_lowest_pitch_class_wins_ambiguity(self):
        # C F G is both C Sus4 and F Sus2
        assert detect_chord([65, 67, 72]) == "C Sus4"
        # A C E G is both A Min7 and C Maj6
        assert detect_chord([57, 60, 64, 67]) == "C Maj6"

    def test_invariant_under_reordering_and_octave_shifts(self):
        for intervals, _ in CHORD_TYPES:
            # compound entries (Add9, octave doublings) fold onto other shapes
            if len(intervals) < 3 or max(intervals) >= 12:
                continue
            notes = [62 + i for i in intervals]
            expected = detect_chord(notes)
            assert expected is not None, str(intervals)
            assert detect_chord(list(reversed(notes))) == expected
            assert detect_chord([notes[0] + 12] + notes[1:]) == expected
            assert detect_chord([n - 24 for n in notes]) == expected

    def test_set_input(self):
        assert detect_chord({60, 64, 67}) == "C Major"
        assert detect_chord((62, 66, 69)) == "D Major"

    def test_too_few_notes(self):
        assert detect_chord([]) is None
        assert detect_chord([60]) is None
        assert detect_chord([60, 64]) is None
        assert detect_chord([60, 60, 64]) is None

    def test_three_notes_two_pitch_classes(self):
        assert detect_chord([60, 72, 64]) is None

    def test_no_match(self):
        assert detect_chord([60, 61, 62]) is None

    def test_not_iterable(self):
        assert detect_chord(None) is None
        assert detect_chord(60) is None

    def test_active_pitch_classes(self):
        assert active_pitch_classes([72, 64, 60, 67]) == [0, 4, 7]


def run_tests():
    """Run all tests and report results."""
    from run_tests import run_test_classes

    return run_test_classes([TestDetectChord])


if __name__ == "__main__":
    sys.exit(0 if run_tests() else 1)
