"""
Chord detection from a set of active MIDI notes.
Pure logic - no hardware dependencies.
"""
import logging

from .constants import Music
from .music_theory import chord_quality_for, format_chord_label, normalize_intervals

logger = logging.getLogger(__name__)


def active_pitch_classes(notes):
    """Distinct pitch classes of a note collection, ascending."""
    return sorted({n % Music.NOTES_PER_OCTAVE for n in notes})


def detect_chord(notes):
    """
    Name the chord formed by a set of MIDI note numbers.

    Every distinct pitch class is tried as the root, lowest pitch class
    first, and the first interval pattern found in the chord table wins.
    Octaves and doublings are discarded before matching, so inversions and
    spread voicings name the same chord.

    Args:
        notes: iterable of MIDI note numbers (list, tuple or set)

    Returns:
        Label such as "C Major", or None for fewer than 3 notes or no match
    """
    try:
        distinct = set(notes)
    except TypeError:
        return None
    if len(distinct) < Music.MIN_CHORD_NOTES:
        return None

    pitch_classes = active_pitch_classes(distinct)
    for root in pitch_classes:
        quality = chord_quality_for(normalize_intervals(pitch_classes, root))
        if quality:
            return format_chord_label(root, quality)

    logger.debug("No chord matches pitch classes %s", pitch_classes)
    return None
