"""
Modal context detection.

Scores every tonic against the seven church modes using the chord history,
and ranks the diatonic triads of a chosen mode as next-chord candidates.
"""
from collections import namedtuple

from .constants import Confidence, Music
from .music_theory import (
    NOTE_NAMES,
    SCALES,
    build_diatonic_triads,
    format_chord_label,
    note_to_pitch_class,
    parse_chord_label,
)
from .suggestion_engine import Suggestion, sort_by_confidence

ModalEstimate = namedtuple("ModalEstimate", ["tonic", "mode", "confidence"])

MODES = ("Ionian", "Dorian", "Phrygian", "Lydian", "Mixolydian", "Aeolian", "Locrian")

# Each mode names its degrees after its own triad qualities
DEGREE_NAMES_BY_MODE = {
    "Ionian": ("I", "ii", "iii", "IV", "V", "vi", "vii°"),
    "Dorian": ("i", "ii", "III", "IV", "v", "vi°", "VII"),
    "Phrygian": ("i", "II", "III", "iv", "v°", "VI", "vii"),
    "Lydian": ("I", "II", "iii", "iv°", "V", "vi", "vii"),
    "Mixolydian": ("I", "ii", "iii°", "IV", "v", "vi", "VII"),
    "Aeolian": ("i", "ii°", "III", "iv", "v", "VI", "VII"),
    "Locrian": ("i°", "II", "iii", "iv", "V", "VI", "vii"),
}

# Base weight of a degree when suggesting inside a mode
TONIC_WEIGHT = 0.9
PREDOMINANT_WEIGHT = 0.7
OTHER_WEIGHT = 0.5


def degree_names(mode):
    """Roman numeral labels for the seven degrees of a church mode."""
    return DEGREE_NAMES_BY_MODE.get(mode, ())


def _degree_weight(degree):
    if degree == Music.TONIC:
        return TONIC_WEIGHT
    if degree in (Music.SUBDOMINANT, Music.DOMINANT):
        return PREDOMINANT_WEIGHT
    return OTHER_WEIGHT


def detect_mode_from_chords(history):
    """
    Find the tonic and church mode that explain the most chords.

    A chord counts when its root and quality equal one of the mode's seven
    diatonic triads. On equal counts the earlier tonic (C first) and the
    earlier mode in MODES wins.

    Args:
        history: sequence of chord labels, oldest first

    Returns:
        ModalEstimate with confidence = matches / parsed chords (2 decimals),
        or None when nothing parses or nothing matches
    """
    if not isinstance(history, (list, tuple)):
        return None
    parsed = [c for c in (parse_chord_label(label) for label in history) if c is not None]
    if not parsed:
        return None

    best_score = 0
    best = None
    for tonic_pc in range(Music.NOTES_PER_OCTAVE):
        for mode in MODES:
            triads = {(t.root_pc, t.quality) for t in build_diatonic_triads(SCALES[mode], tonic_pc)}
            score = sum(1 for c in parsed if (c.root_pc, c.quality_string) in triads)
            confidence = round(score / len(parsed), 2)
            if score > best_score or (
                score == best_score and best is not None and confidence > best.confidence
            ):
                best_score = score
                best = ModalEstimate(NOTE_NAMES[tonic_pc], mode, confidence)

    return best


def suggest_modal_next_chords(mode, tonic, last_chord=None):
    """
    Rank the seven diatonic triads of a mode as the next chord.

    The tonic weighs 0.9, the fourth and fifth degrees 0.7, the rest 0.5.
    Repeating last_chord costs 0.2 but is still offered.

    Args:
        mode: church mode name, e.g. "Dorian"
        tonic: sharp-spelled note name, e.g. "D"
        last_chord: optional label of the chord just played

    Returns:
        List of Suggestion, best first; empty for unknown mode or tonic
    """
    if mode not in DEGREE_NAMES_BY_MODE:
        return []
    tonic_pc = note_to_pitch_class(tonic)
    if tonic_pc == -1:
        return []

    names = DEGREE_NAMES_BY_MODE[mode]
    last = parse_chord_label(last_chord) if last_chord else None
    suggestions = []

    for triad in build_diatonic_triads(SCALES[mode], tonic_pc):
        confidence = _degree_weight(triad.degree)
        if last is not None and last.same_chord(triad.root_pc, triad.quality):
            confidence -= Confidence.MODAL_REPEAT_PENALTY
        confidence = max(Confidence.MIN, min(Confidence.MAX, confidence))
        suggestions.append(
            Suggestion(format_chord_label(triad.root_pc, triad.quality), names[triad.degree], confidence)
        )

    return sort_by_confidence(suggestions)
