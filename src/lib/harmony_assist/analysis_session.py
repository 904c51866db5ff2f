"""
Analysis session - runs the per-input analysis cycle.

Each change of the held notes goes through: detect chord -> update the key
tracker -> regenerate every suggestion category. Results are returned as a
snapshot and announced to subscribers, so a renderer never calls the
engine functions directly.
"""
import logging
from collections import namedtuple

from .chord_detector import detect_chord
from .config import session_options_from
from .key_tracker import KeyTracker
from .modal_context import detect_mode_from_chords, suggest_modal_next_chords
from .suggestion_engine import (
    suggest_diatonic_chords,
    suggest_extensions,
    suggest_intervals,
    suggest_next_chords,
    suggest_scales,
)

logger = logging.getLogger(__name__)


class Event:
    """Event type constants for analysis results."""

    CHORD_DETECTED = "chord_detected"
    KEY_CHANGED = "key_changed"
    SUGGESTIONS_UPDATED = "suggestions_updated"
    NOTES_CLEARED = "notes_cleared"


AnalysisSnapshot = namedtuple(
    "AnalysisSnapshot",
    [
        "notes",
        "chord",
        "key",
        "keys",
        "mode",
        "diatonic",
        "scales",
        "extensions",
        "next_chords",
        "modal_next",
        "intervals",
    ],
)

CHORD_CATEGORIES = ("diatonic", "scales", "extensions", "next_chords", "modal_next")


class AnalysisSession:
    """
    Holds the state of one analysis run: the key tracker, the chord history
    and the last chord-level suggestions (kept visible while fewer than
    three notes are held).
    Not thread safe; feed it from one input handler.
    """

    def __init__(self, options=None):
        """
        Args:
            options: SessionOptions, a mapping of its fields, or None
        """
        self.options = session_options_from(options)
        self.key_tracker = KeyTracker(self.options.key_history)
        self.chord_history = []
        self.current_chord = None
        self.current_key = None
        self.keys = []
        self.mode = None
        self._cached = {name: [] for name in CHORD_CATEGORIES}

        # Event subscribers
        self._subscribers = {}

    def subscribe(self, event_type, callback):
        """
        Subscribe to an event type.

        Args:
            event_type: Event type constant from Event class
            callback: Function to call when event occurs, receives data dict
        """
        if event_type not in self._subscribers:
            self._subscribers[event_type] = []
        self._subscribers[event_type].append(callback)

    def unsubscribe(self, event_type, callback):
        """Remove a callback from an event type."""
        if event_type in self._subscribers:
            try:
                self._subscribers[event_type].remove(callback)
            except ValueError:
                pass

    def emit(self, event_type, data=None):
        """Emit an event to all subscribers."""
        if event_type in self._subscribers:
            for callback in self._subscribers[event_type]:
                callback(data)

    def process_notes(self, active_notes):
        """
        Analyse the currently held notes.

        Args:
            active_notes: iterable of MIDI note numbers held right now

        Returns:
            AnalysisSnapshot; chord-level categories fall back to the last
            detected chord's suggestions when no chord is held
        """
        notes = sorted(set(active_notes or ()))
        intervals = []

        if not notes:
            self.emit(Event.NOTES_CLEARED, {"chord": self.current_chord})
        else:
            chord = detect_chord(notes)
            if chord:
                self._update_for_chord(chord)
            else:
                intervals = suggest_intervals(notes)

        return self._snapshot(notes, intervals)

    def _update_for_chord(self, chord):
        self.current_chord = chord
        self.key_tracker.add_chord(chord)
        if not self.chord_history or self.chord_history[-1] != chord:
            self.chord_history.append(chord)

        self.keys = self.key_tracker.detect()
        key = None
        if self.keys:
            key = self.keys[0].root + " " + self.keys[0].scale
        if key != self.current_key:
            self.current_key = key
            self.emit(Event.KEY_CHANGED, {"key": key, "keys": list(self.keys)})

        self.mode = detect_mode_from_chords(self.chord_history)
        self.emit(Event.CHORD_DETECTED, {"chord": chord, "key": key, "mode": self.mode})

        self._cached = {
            "diatonic": suggest_diatonic_chords(key, chord),
            "scales": suggest_scales(key, chord),
            "extensions": suggest_extensions(chord),
            "next_chords": suggest_next_chords(
                self.chord_history,
                key,
                self.options.memory_length,
                self.options.allow_repeat,
            ),
            "modal_next": (
                suggest_modal_next_chords(self.mode.mode, self.mode.tonic, chord)
                if self.mode is not None
                else []
            ),
        }
        logger.debug("Analysed %s in %s", chord, key)
        self.emit(Event.SUGGESTIONS_UPDATED, dict(self._cached))

    def _snapshot(self, notes, intervals):
        return AnalysisSnapshot(
            notes=notes,
            chord=self.current_chord,
            key=self.current_key,
            keys=list(self.keys),
            mode=self.mode,
            intervals=intervals,
            **{name: list(self._cached[name]) for name in CHORD_CATEGORIES},
        )

    def reset(self):
        """Forget every chord, key estimate and cached suggestion."""
        self.key_tracker.reset()
        self.chord_history = []
        self.current_chord = None
        self.current_key = None
        self.keys = []
        self.mode = None
        self._cached = {name: [] for name in CHORD_CATEGORIES}
