"""
Rolling key inference over the most recent chords.
"""
import logging
from collections import deque, namedtuple

from .constants import Confidence, Music
from .music_theory import NOTE_NAMES, SCALES, parse_chord_label, pitch_class_set

logger = logging.getLogger(__name__)

KeyEstimate = namedtuple("KeyEstimate", ["root", "scale", "score"])

# One remembered chord: its absolute pitch classes and its root
HistoryEntry = namedtuple("HistoryEntry", ["pitch_classes", "root_pc"])


class KeyTracker:
    """
    Keeps a bounded history of chords and scores every (root, scale) pair
    against it.

    One tracker belongs to one analysis session; callers serialize access.
    """

    def __init__(self, capacity=Confidence.KEY_HISTORY_SIZE):
        """
        Args:
            capacity: Number of chords remembered before the oldest is dropped
        """
        self._history = deque(maxlen=capacity)

    @property
    def history(self):
        """Remembered chords, oldest first."""
        return tuple(self._history)

    def __len__(self):
        return len(self._history)

    def add_chord(self, label):
        """
        Remember a chord label such as "F# Min7".
        Unparsable labels and unknown qualities are ignored.
        """
        parsed = parse_chord_label(label)
        if parsed is None:
            return
        intervals = parsed.intervals
        if intervals is None:
            logger.debug("Ignoring chord with unknown quality: %r", label)
            return
        pcs = [(parsed.root_pc + i) % Music.NOTES_PER_OCTAVE for i in intervals]
        self._history.append(HistoryEntry(pcs, parsed.root_pc))

    def detect(self):
        """
        Rank candidate keys against the remembered chords.

        Score is the fraction of remembered chord tones that fall inside the
        scale, plus a bonus when the latest chord's root is the key root.

        Returns:
            Up to 5 KeyEstimate, best first; empty when nothing is remembered
        """
        if not self._history:
            return []

        total = sum(len(entry.pitch_classes) for entry in self._history)
        last_root = self._history[-1].root_pc
        scores = []

        for root in range(Music.NOTES_PER_OCTAVE):
            for scale_name, scale_intervals in SCALES.items():
                scale_pcs = pitch_class_set(root, scale_intervals)
                hits = sum(
                    1
                    for entry in self._history
                    for pc in entry.pitch_classes
                    if pc in scale_pcs
                )
                score = hits / total if total else 0.0
                if last_root == root:
                    score += Confidence.KEY_ROOT_BONUS
                scores.append(KeyEstimate(NOTE_NAMES[root], scale_name, score))

        scores.sort(key=lambda k: k.score, reverse=True)
        return scores[:Confidence.KEY_TOP_N]

    def reset(self):
        """Forget all remembered chords."""
        self._history.clear()
