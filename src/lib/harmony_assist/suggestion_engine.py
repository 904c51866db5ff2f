"""
Suggestion engine - pure business logic.

Every public function takes chord/key labels or note numbers and returns
new values; malformed input gives an empty list or None instead of raising.
"""
import logging
from collections import namedtuple

from .chord_detector import detect_chord
from .constants import Confidence, Music
from .music_theory import (
    INTERVALS,
    MODAL_MODIFIERS,
    QUALITY_TO_INTERVALS,
    HALF_DIMINISHED,
    NOTE_NAMES,
    SCALES,
    ChordLabel,
    build_diatonic_triads,
    format_chord_label,
    has_third,
    note_name,
    note_number,
    parse_chord_label,
    roman_numeral,
)

logger = logging.getLogger(__name__)

Suggestion = namedtuple("Suggestion", ["name", "function", "confidence"])
IntervalSuggestion = namedtuple("IntervalSuggestion", ["name", "interval", "result", "function"])
ChordMetadata = namedtuple("ChordMetadata", ["note_names", "midi_notes", "fingering"])

# Shown by interval suggestions when the addition does not complete a chord
NO_CHORD_YET = "—"

# Diatonic suggestion confidence per degree (I, IV, V, vi favoured)
DIATONIC_CONFIDENCE = {
    Music.TONIC: 1.0,
    Music.SUBDOMINANT: 0.8,
    Music.DOMINANT: 0.9,
    Music.SUBMEDIANT: 0.8,
}
DIATONIC_DEFAULT = 0.5

# Extension menus per base quality: (quality, function, confidence)
EXTENSION_MENU = {
    "Major": (
        ("Maj7", "add major 7th", 0.9),
        ("Dom7", "add dominant 7th", 0.8),
        ("Maj6", "add major 6th", 0.7),
        ("Sus4", "suspend to 4th", 0.5),
        ("Sus2", "suspend to 2nd", 0.5),
        ("Add9", "add 9th", 0.6),
    ),
    "Minor": (
        ("Min7", "add minor 7th", 0.9),
        ("MinMaj7", "add major 7th", 0.5),
        ("Min6", "add major 6th", 0.6),
        ("mAdd9", "add 9th", 0.6),
    ),
    "Diminished": (
        (HALF_DIMINISHED, "add minor 7th", 0.8),
        ("Dim7", "add diminished 7th", 0.7),
    ),
}

# Qualities a tonal chord may be turned into
VALID_EXTENSIONS = {
    "Major": ("Maj7", "Dom7", "Maj6", "Sus4", "Sus2", "Add9", "7sus4"),
    "Minor": ("Min7", "MinMaj7", "Min6", "mAdd9"),
    "Diminished": (HALF_DIMINISHED, "Dim7"),
    "Augmented": (),
}

# Extensions that presuppose a third and are rejected on modal voicings:
# every table quality built on a third plus altered-tone labels
QUALITY_DEPENDENT_EXTENSIONS = frozenset(
    [q for q, intervals in QUALITY_TO_INTERVALS.items() if has_third(intervals)]
    + ["min7", "#11", "b9", "b6"]
)

# Candidate additions above the lowest held note, in evaluation order
INTERVAL_ADDITIONS = (
    (INTERVALS["minor_third"], "Minor 3rd"),
    (INTERVALS["major_third"], "Major 3rd"),
    (INTERVALS["perfect_fifth"], "Perfect 5th"),
    (INTERVALS["minor_seventh"], "Minor 7th"),
    (INTERVALS["major_seventh"], "Major 7th"),
)

# Starting score of each degree when continuing a progression
NEXT_CHORD_BASE = {
    Music.TONIC: 0.5,
    Music.DOMINANT: 0.4,
    Music.SUBDOMINANT: 0.35,
    Music.SUBMEDIANT: 0.3,
}
NEXT_CHORD_DEFAULT = 0.2

# Common harmonic motion: (from degree, to degree, bonus). First match wins.
MOTION_RULES = (
    (Music.DOMINANT, Music.TONIC, 0.35),  # authentic cadence
    (Music.SUBDOMINANT, Music.DOMINANT, 0.25),  # pre-dominant to dominant
    (Music.TONIC, Music.SUBDOMINANT, 0.2),
    (Music.TONIC, Music.DOMINANT, 0.2),
    (Music.SUBMEDIANT, Music.SUBDOMINANT, 0.2),
    (Music.DOMINANT, Music.SUBMEDIANT, 0.15),  # deceptive cadence
    (Music.SUPERTONIC, Music.DOMINANT, 0.25),  # ii-V
    (Music.TONIC, Music.SUBMEDIANT, 0.15),
    (Music.SUBDOMINANT, Music.TONIC, 0.3),  # plagal cadence
    (Music.MEDIANT, Music.SUBMEDIANT, 0.1),
    (Music.SUBMEDIANT, Music.SUPERTONIC, 0.15),  # descending fifths
)

# Right-hand piano fingering by voicing size (root position)
FINGERING = {
    3: [1, 3, 5],
    4: [1, 2, 3, 5],
    5: [1, 2, 3, 4, 5],
}


def sort_by_confidence(suggestions):
    """Sort suggestions best first; equal confidences keep their order."""
    return sorted(suggestions, key=lambda s: s.confidence, reverse=True)


def _clamp(value):
    return max(Confidence.MIN, min(Confidence.MAX, value))


def _diatonic_triads_for_key(key):
    """Parsed key and its diatonic triads, or (None, []) when unusable."""
    parsed_key = parse_chord_label(key)
    if parsed_key is None:
        return None, []
    scale = SCALES.get(parsed_key.quality_string)
    return parsed_key, build_diatonic_triads(scale, parsed_key.root_pc)


# ============================================================================
# DIATONIC CHORDS
# ============================================================================
def suggest_diatonic_chords(key, current_chord=None):
    """
    Suggest the diatonic triads of a key, leaving out the current chord.

    Args:
        key: key label such as "C Major" or "A Harmonic Minor" (7-note scales)
        current_chord: optional chord label to exclude

    Returns:
        List of Suggestion with Roman numeral functions, best first
    """
    _, triads = _diatonic_triads_for_key(key)
    current = parse_chord_label(current_chord) if current_chord else None
    suggestions = []

    for triad in triads:
        if current is not None and current.same_chord(triad.root_pc, triad.quality):
            continue
        suggestions.append(
            Suggestion(
                format_chord_label(triad.root_pc, triad.quality),
                roman_numeral(triad.degree, triad.quality),
                DIATONIC_CONFIDENCE.get(triad.degree, DIATONIC_DEFAULT),
            )
        )

    return sort_by_confidence(suggestions)


# ============================================================================
# SCALES
# ============================================================================
def suggest_scales(key, current_chord=None):
    """
    Suggest scales that contain every tone of the current chord.

    Scales are built on the key root, or on the chord root when no key is
    known. The key's own scale gets a 0.2 bonus. Without chord tones every
    scale is offered at 0.5.

    Returns:
        List of Suggestion named "<Root> <Scale>", best first
    """
    parsed_key = parse_chord_label(key) if key else None
    parsed_chord = parse_chord_label(current_chord) if current_chord else None
    if parsed_key is None and parsed_chord is None:
        return []

    chord_pcs = []
    if parsed_chord is not None and parsed_chord.intervals is not None:
        chord_pcs = [(parsed_chord.root_pc + i) % Music.NOTES_PER_OCTAVE for i in parsed_chord.intervals]

    root = parsed_key.root_pc if parsed_key is not None else parsed_chord.root_pc
    key_scale = parsed_key.quality_string if parsed_key is not None else None
    suggestions = []

    for scale_name, scale_intervals in SCALES.items():
        scale_pcs = {(root + i) % Music.NOTES_PER_OCTAVE for i in scale_intervals}
        if chord_pcs:
            fit = sum(1 for pc in chord_pcs if pc in scale_pcs) / len(chord_pcs)
            if fit < 1.0:
                continue
        else:
            fit = Confidence.NO_CHORD_FIT

        is_parent = scale_name == key_scale
        confidence = min(Confidence.MAX, fit + (Confidence.PARENT_SCALE_BONUS if is_parent else 0.0))
        suggestions.append(
            Suggestion(
                NOTE_NAMES[root] + " " + scale_name,
                "parent scale" if is_parent else "compatible",
                round(confidence, 2),
            )
        )

    return sort_by_confidence(suggestions)


# ============================================================================
# EXTENSIONS
# ============================================================================
def suggest_extensions(current_chord):
    """
    Suggest richer qualities for a chord, and stackable modifiers when the
    chord has no third (sus, power and already-stacked voicings).

    Tonal suggestions are full labels ("C Maj7"); modal ones are bare
    modifier tokens ("add6") meant for apply_extension.
    """
    parsed = parse_chord_label(current_chord)
    if parsed is None:
        return []
    intervals = parsed.intervals
    if intervals is None:
        return []

    suggestions = [
        Suggestion(format_chord_label(parsed.root_pc, quality), function, confidence)
        for quality, function, confidence in EXTENSION_MENU.get(parsed.quality_string, ())
    ]

    if not has_third(intervals):
        for modifier in MODAL_MODIFIERS:
            if modifier in parsed.modifiers:
                continue
            suggestions.append(Suggestion(modifier, "modal stack: " + modifier, Confidence.MODAL_MODIFIER))

    return sort_by_confidence(suggestions)


# ============================================================================
# INTERVAL COMPLETION
# ============================================================================
def suggest_intervals(active_notes):
    """
    Suggest a note to add when only one or two notes are held.

    Each candidate interval is measured from the lowest held note and
    skipped when its pitch class is already held. The chord the addition
    would complete is predicted with detect_chord.

    Args:
        active_notes: iterable of MIDI note numbers

    Returns:
        List of IntervalSuggestion in fixed interval order (not ranked)
    """
    try:
        notes = sorted(set(active_notes))
    except TypeError:
        return []
    if not notes or len(notes) >= Music.MIN_CHORD_NOTES:
        return []
    if not all(isinstance(n, int) for n in notes):
        return []

    lowest = notes[0]
    held = {n % Music.NOTES_PER_OCTAVE for n in notes}
    suggestions = []

    for semitones, label in INTERVAL_ADDITIONS:
        new_note = lowest + semitones
        if new_note % Music.NOTES_PER_OCTAVE in held:
            continue
        hypothetical = notes + [new_note]
        result = None
        if len(hypothetical) >= Music.MIN_CHORD_NOTES:
            result = detect_chord(hypothetical)
        suggestions.append(
            IntervalSuggestion("Add " + note_name(new_note), "+" + str(semitones), result or NO_CHORD_YET, label)
        )

    return suggestions


# ============================================================================
# PROGRESSION CONTINUATION
# ============================================================================
def calculate_voice_leading_cost(prev_notes, next_notes):
    """
    Sum, over the previous voicing, of each note's distance in semitones
    to the nearest note of the next voicing. Not symmetric.
    """
    if not prev_notes:
        return 0
    if not next_notes:
        return float("inf")
    return sum(min(abs(p - n) for n in next_notes) for p in prev_notes)


def _motion_bonus(from_degree, to_degree):
    for rule_from, rule_to, bonus in MOTION_RULES:
        if rule_from == from_degree and rule_to == to_degree:
            return bonus
    return 0.0


def suggest_next_chords(history, key, memory_length=Confidence.DEFAULT_MEMORY, allow_repeat=False):
    """
    Rank diatonic chords as the continuation of a progression.

    Scoring per candidate: degree weight, cadential motion bonus from the
    last chord, 0.1 off per appearance in the last memory_length chords,
    then 0.05 off per semitone of voice-leading cost from the last chord
    (both voiced at octave 4).

    Args:
        history: sequence of chord labels, most recent last
        key: key label with a 7-note scale, e.g. "C Major"
        memory_length: size of the recency window
        allow_repeat: keep the last chord as a candidate (with a 0.35
            penalty) instead of leaving it out

    Returns:
        Up to 5 Suggestion with positive confidence, best first
    """
    if not isinstance(history, (list, tuple)) or not history:
        return []
    _, triads = _diatonic_triads_for_key(key)
    if not triads:
        return []

    last_chord = history[-1]
    window = list(history[-memory_length:]) if memory_length > 0 else []
    last = parse_chord_label(last_chord)
    recent = [c for c in (parse_chord_label(label) for label in window) if c is not None]

    last_degree = None
    if last is not None:
        for triad in triads:
            if last.same_chord(triad.root_pc, triad.quality):
                last_degree = triad.degree
                break

    prev_meta = get_chord_metadata(last_chord) if last is not None else None
    scored = []

    for triad in triads:
        name = format_chord_label(triad.root_pc, triad.quality)
        score = NEXT_CHORD_BASE.get(triad.degree, NEXT_CHORD_DEFAULT)
        if last_degree is not None:
            score += _motion_bonus(last_degree, triad.degree)

        if last is not None and last.same_chord(triad.root_pc, triad.quality):
            if not allow_repeat:
                continue
            score -= Confidence.REPEAT_PENALTY

        score -= Confidence.RECENT_PENALTY * sum(
            1 for c in recent if c.same_chord(triad.root_pc, triad.quality)
        )
        score = _clamp(score)

        if prev_meta is not None:
            next_meta = get_chord_metadata(name)
            if next_meta is not None:
                cost = calculate_voice_leading_cost(prev_meta.midi_notes, next_meta.midi_notes)
                score = _clamp(score - cost * Confidence.VOICE_LEADING_WEIGHT)

        scored.append(Suggestion(name, roman_numeral(triad.degree, triad.quality), score))

    ranked = [s for s in sort_by_confidence(scored) if s.confidence > 0]
    return ranked[:Confidence.NEXT_CHORD_LIMIT]


# ============================================================================
# VOICING & TRANSFORMS
# ============================================================================
def get_chord_metadata(label, octave=Music.DEFAULT_OCTAVE):
    """
    Resolve a chord label to a root-position voicing.

    Args:
        label: chord label, compound modal labels included ("C Sus4 add6")
        octave: octave of the root (4 puts C on MIDI 60)

    Returns:
        ChordMetadata(note_names, midi_notes, fingering) or None
    """
    parsed = parse_chord_label(label)
    if parsed is None:
        return None
    intervals = parsed.intervals
    if intervals is None:
        return None

    base = note_number(parsed.root_pc, octave)
    midi_notes = [base + i for i in intervals]
    note_names = [note_name(n) for n in midi_notes]
    fingering = FINGERING.get(len(midi_notes), list(range(1, len(midi_notes) + 1)))
    return ChordMetadata(note_names, midi_notes, list(fingering))


def apply_extension(base_chord, extension_type):
    """
    Transform a chord with an extension and return the new label.

    Chords without a third ("Sus2", "Sus4", "5" and stacks built on them)
    accept stackable modifiers, which are appended once each in order
    ("C Sus4" + "add6" -> "C Sus4 add6"); they reject extensions that need
    a third. Other chords are replaced by the requested quality when it is
    on the base quality's list or is any known quality.

    Returns:
        New chord label, or None when the request is invalid
    """
    parsed = parse_chord_label(base_chord)
    if parsed is None:
        return None
    if not isinstance(extension_type, str) or not extension_type:
        return None

    intervals = parsed.intervals
    is_modal = intervals is not None and not has_third(intervals)

    if is_modal:
        if extension_type in QUALITY_DEPENDENT_EXTENSIONS:
            logger.debug("Rejected %s on modal voicing %s", extension_type, base_chord)
            return None
        if extension_type in MODAL_MODIFIERS:
            modifiers = tuple(parsed.modifiers)
            if extension_type not in modifiers:
                modifiers += (extension_type,)
            stacked = ChordLabel(parsed.root_pc, parsed.quality, modifiers)
            logger.debug("%s -> %s %s", base_chord, stacked.name, stacked.intervals)
            return stacked.name

    allowed = VALID_EXTENSIONS.get(parsed.quality_string)
    if allowed is None or extension_type not in allowed:
        if extension_type not in QUALITY_TO_INTERVALS:
            return None
    return format_chord_label(parsed.root_pc, extension_type)
