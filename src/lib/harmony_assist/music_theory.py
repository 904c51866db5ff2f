"""
Pure music theory tables and helpers - no I/O, no state.

Holds the pitch utilities, the chord table (interval set <-> quality label),
the scale table and the "<Root> <Quality>" label parser shared by every
other module.
"""
from collections import namedtuple

from .constants import Music, Midi

# Interval definitions (in semitones)
INTERVALS = {
    "unison": 0,
    "minor_second": 1,
    "major_second": 2,
    "minor_third": 3,
    "major_third": 4,
    "perfect_fourth": 5,
    "tritone": 6,
    "perfect_fifth": 7,
    "minor_sixth": 8,
    "major_sixth": 9,
    "minor_seventh": 10,
    "major_seventh": 11,
    "octave": 12,
}

# Root note names (sharp spelling only)
NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Chord table: interval set relative to the root -> quality label.
# Order matters for the reverse lookup: the first entry of a quality wins.
CHORD_TYPES = (
    # Triads
    ((0, 4, 7), "Major"),
    ((0, 3, 7), "Minor"),
    ((0, 3, 6), "Diminished"),
    ((0, 4, 8), "Augmented"),
    ((0, 4, 7, 12), "Major"),  # octave doubling
    ((0, 3, 7, 12), "Minor"),
    # Sevenths
    ((0, 4, 7, 11), "Maj7"),
    ((0, 4, 7, 10), "Dom7"),
    ((0, 3, 7, 10), "Min7"),
    ((0, 3, 7, 11), "MinMaj7"),
    ((0, 3, 6, 10), "m7b5 (Half-Dim)"),
    ((0, 3, 6, 9), "Dim7"),
    # Suspended
    ((0, 5, 7), "Sus4"),
    ((0, 2, 7), "Sus2"),
    ((0, 5, 7, 10), "7sus4"),
    # Power
    ((0, 7), "5"),
    # Sixths
    ((0, 4, 7, 9), "Maj6"),
    ((0, 3, 7, 9), "Min6"),
    # Add9
    ((0, 4, 7, 14), "Add9"),
    ((0, 3, 7, 14), "mAdd9"),
)

HALF_DIMINISHED = "m7b5 (Half-Dim)"

# Scale definitions as interval patterns from root
SCALES = {
    "Major": (0, 2, 4, 5, 7, 9, 11),
    "Minor": (0, 2, 3, 5, 7, 8, 10),  # natural minor
    "Harmonic Minor": (0, 2, 3, 5, 7, 8, 11),
    "Melodic Minor": (0, 2, 3, 5, 7, 9, 11),
    "Ionian": (0, 2, 4, 5, 7, 9, 11),
    "Dorian": (0, 2, 3, 5, 7, 9, 10),
    "Phrygian": (0, 1, 3, 5, 7, 8, 10),
    "Lydian": (0, 2, 4, 6, 7, 9, 11),
    "Mixolydian": (0, 2, 4, 5, 7, 9, 10),
    "Aeolian": (0, 2, 3, 5, 7, 8, 10),
    "Locrian": (0, 1, 3, 5, 6, 8, 10),
    "Pentatonic Major": (0, 2, 4, 7, 9),
    "Pentatonic Minor": (0, 3, 5, 7, 10),
    "Blues": (0, 3, 5, 6, 7, 10),
    "Blues Minor": (0, 3, 5, 6, 7, 10),
    "Blues Major": (0, 2, 3, 4, 7, 9),
    "Double Harmonic Major": (0, 1, 4, 5, 7, 8, 11),
    "Phrygian Dominant": (0, 1, 4, 5, 7, 8, 10),
    "Hungarian Minor": (0, 2, 3, 6, 7, 8, 11),
    "Whole Tone": (0, 2, 4, 6, 8, 10),
    "Diminished HW": (0, 1, 3, 4, 6, 7, 9, 10),
    "Insen": (0, 1, 5, 7, 10),
}

# Stackable modifiers for chords without a third: token -> (added, removed)
MODAL_MODIFIERS = {
    "add2": ((2,), ()),
    "add4": ((5,), ()),
    "add6": ((9,), ()),
    "add9": ((14,), ()),
    "add11": ((17,), ()),
    "add13": ((21,), ()),
    "no3": ((), (3, 4)),
    "no5": ((), (7,)),
}

# Roman numeral labels
ROMAN_NUMERALS = ["I", "II", "III", "IV", "V", "VI", "VII"]


def _build_lookup_tables():
    """Build the interval -> quality and quality -> interval maps once."""
    by_intervals = {}
    by_quality = {}
    for intervals, quality in CHORD_TYPES:
        by_intervals[intervals] = quality
        by_quality.setdefault(quality, intervals)
    return by_intervals, by_quality


INTERVALS_TO_QUALITY, QUALITY_TO_INTERVALS = _build_lookup_tables()

# Only the three-note entries are used when stacking diatonic triads
TRIAD_QUALITIES = {k: v for k, v in INTERVALS_TO_QUALITY.items() if len(k) == 3}


# ============================================================================
# PITCH UTILITIES
# ============================================================================
def note_name(midi_note):
    """Convert MIDI note number to note name."""
    return NOTE_NAMES[midi_note % Music.NOTES_PER_OCTAVE]


def note_to_pitch_class(name):
    """Return the pitch class (0-11) of a sharp-spelled note name, or -1."""
    try:
        return NOTE_NAMES.index(name)
    except ValueError:
        return -1


def midi_to_note_name(midi_note):
    """
    Convert a MIDI note number to scientific pitch notation.

    Args:
        midi_note: MIDI note number 0-127 (60 = C4)

    Returns:
        String such as "C4" or "A#2", or "Invalid" when out of range
    """
    if not Midi.NOTE_MIN <= midi_note <= Midi.NOTE_MAX:
        return "Invalid"
    octave = midi_note // Music.NOTES_PER_OCTAVE - 1
    return note_name(midi_note) + str(octave)


def note_number(pitch_class, octave):
    """Return the MIDI note number of a pitch class in an octave (C4 = 60)."""
    return pitch_class + Music.NOTES_PER_OCTAVE * (octave + 1)


def pitch_class_set(root_pc, intervals):
    """Absolute pitch classes of an interval set played from root_pc."""
    return {(root_pc + i) % Music.NOTES_PER_OCTAVE for i in intervals}


def normalize_intervals(pitch_classes, root_pc):
    """Intervals of a pitch-class collection relative to root_pc, ascending."""
    return tuple(sorted((pc - root_pc) % Music.NOTES_PER_OCTAVE for pc in pitch_classes))


# ============================================================================
# CHORD TABLE
# ============================================================================
def chord_quality_for(intervals):
    """Return the quality label for an interval set, or None."""
    return INTERVALS_TO_QUALITY.get(tuple(intervals))


def intervals_for_quality(quality):
    """Return the interval set of a single table quality, or None."""
    return QUALITY_TO_INTERVALS.get(quality)


def has_third(intervals):
    """True when the interval set contains a minor or major third."""
    return INTERVALS["minor_third"] in intervals or INTERVALS["major_third"] in intervals


def apply_modifier(intervals, modifier):
    """
    Apply one stackable modifier to an interval set.

    Args:
        intervals: iterable of semitone offsets
        modifier: token from MODAL_MODIFIERS (e.g. "add6", "no5")

    Returns:
        New ascending tuple of intervals
    """
    added, removed = MODAL_MODIFIERS[modifier]
    result = set(intervals)
    result.update(added)
    result.difference_update(removed)
    return tuple(sorted(result))


def split_quality(quality):
    """
    Split a quality string into its table quality and modifier tokens.

    "Sus4" -> ("Sus4", ()), "Sus4 add2 add6" -> ("Sus4", ("add2", "add6")).
    Returns None when the string is neither a table quality nor a table
    quality followed only by recognized modifiers.
    """
    if quality in QUALITY_TO_INTERVALS:
        return quality, ()
    words = quality.split(" ")
    if len(words) > 1 and words[0] in QUALITY_TO_INTERVALS:
        modifiers = tuple(words[1:])
        if all(m in MODAL_MODIFIERS for m in modifiers):
            return words[0], modifiers
    return None


def resolve_intervals(quality):
    """
    Return the interval set for a (possibly compound) quality string.

    Compound strings have every modifier applied in order. Returns None
    for unknown qualities.
    """
    split = split_quality(quality)
    if split is None:
        return None
    base, modifiers = split
    intervals = QUALITY_TO_INTERVALS[base]
    for modifier in modifiers:
        intervals = apply_modifier(intervals, modifier)
    return intervals


# ============================================================================
# LABEL PARSING
# ============================================================================
class ChordLabel(namedtuple("ChordLabel", ["root_pc", "quality", "modifiers"])):
    """
    Parsed "<Root> <Quality>" label.

    quality is the base quality (a chord table label for chords, a scale
    name for keys, or an unknown string). modifiers holds stacked modal
    modifier tokens in application order.
    """

    __slots__ = ()

    @property
    def root_name(self):
        return NOTE_NAMES[self.root_pc]

    @property
    def quality_string(self):
        return " ".join((self.quality,) + tuple(self.modifiers))

    @property
    def name(self):
        return self.root_name + " " + self.quality_string

    @property
    def intervals(self):
        """Interval set of the chord, or None when the quality is unknown."""
        return resolve_intervals(self.quality_string)

    def same_chord(self, root_pc, quality_string):
        return self.root_pc == root_pc and self.quality_string == quality_string

    def __str__(self):
        return self.name


def parse_chord_label(label):
    """
    Parse "<Root> <Quality>" into a ChordLabel.

    The root is everything before the first run of whitespace and must be
    one of NOTE_NAMES. Returns None for non-strings, labels without a
    quality and unknown roots. Unknown qualities still parse; callers
    check ChordLabel.intervals.
    """
    if not isinstance(label, str):
        return None
    parts = label.strip().split(None, 1)
    if len(parts) < 2:
        return None
    root_pc = note_to_pitch_class(parts[0])
    if root_pc == -1:
        return None
    quality = " ".join(parts[1].split())
    split = split_quality(quality)
    if split is None:
        return ChordLabel(root_pc, quality, ())
    return ChordLabel(root_pc, split[0], split[1])


def format_chord_label(root_pc, quality):
    """Build a "<Root> <Quality>" label."""
    return NOTE_NAMES[root_pc % Music.NOTES_PER_OCTAVE] + " " + quality


# ============================================================================
# SCALES & DIATONIC TRIADS
# ============================================================================
Triad = namedtuple("Triad", ["degree", "root_pc", "quality"])


def get_scale_names():
    """Return list of available scale names."""
    return list(SCALES.keys())


def get_scale_degrees(scale_name):
    """Return the interval pattern for a scale, or None."""
    return SCALES.get(scale_name)


def triad_on_degree(scale_intervals, degree):
    """
    Determine the triad stacked in thirds on a scale degree.

    Args:
        scale_intervals: 7-note scale interval pattern
        degree: Scale degree 0-6

    Returns:
        (root_offset, quality) or None when the shape has no triad label
    """
    length = len(scale_intervals)
    root = scale_intervals[degree]
    third = scale_intervals[(degree + 2) % length]
    fifth = scale_intervals[(degree + 4) % length]
    quality = TRIAD_QUALITIES.get(normalize_intervals((root, third, fifth), root))
    if quality is None:
        return None
    return root, quality


def build_diatonic_triads(scale_intervals, tonic_pc):
    """
    Build the diatonic triads of a 7-note scale played from tonic_pc.

    Returns:
        List of Triad(degree, root_pc, quality); degrees whose shape has no
        table label are left out. Empty when the scale is not heptatonic.
    """
    if not scale_intervals or len(scale_intervals) != Music.SCALE_DEGREES:
        return []
    triads = []
    for degree in range(Music.SCALE_DEGREES):
        found = triad_on_degree(scale_intervals, degree)
        if found is None:
            continue
        root_offset, quality = found
        root_pc = (tonic_pc + root_offset) % Music.NOTES_PER_OCTAVE
        triads.append(Triad(degree, root_pc, quality))
    return triads


def roman_numeral(degree, quality):
    """
    Roman numeral for a diatonic triad.
    Uppercase for major, lowercase for minor/diminished, degree sign for
    diminished and plus sign for augmented.
    """
    numeral = ROMAN_NUMERALS[degree]
    if quality in ("Minor", "Diminished"):
        numeral = numeral.lower()
    if quality == "Diminished":
        numeral += "°"
    elif quality == "Augmented":
        numeral += "+"
    return numeral
