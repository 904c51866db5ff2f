"""
Constants for the harmony assistant.
All magic strings and numbers are defined here for easy maintenance.
"""


# ============================================================================
# MUSIC CONSTANTS
# ============================================================================
class Music:
    """Music theory constants."""
    NOTES_PER_OCTAVE = 12
    SCALE_DEGREES = 7
    MIN_CHORD_NOTES = 3
    DEFAULT_OCTAVE = 4

    # Degree indices inside a 7-note scale
    TONIC = 0
    SUPERTONIC = 1
    MEDIANT = 2
    SUBDOMINANT = 3
    DOMINANT = 4
    SUBMEDIANT = 5
    LEADING_TONE = 6


# ============================================================================
# MIDI CONSTANTS
# ============================================================================
class Midi:
    """MIDI-related constants."""
    NOTE_MIN = 0
    NOTE_MAX = 127

    VELOCITY_DEFAULT = 100
    RELEASE_VELOCITY = 0

    # Standard MIDI File layout
    TICKS_PER_BEAT = 480
    HEADER_TAG = b"MThd"
    TRACK_TAG = b"MTrk"
    HEADER_LENGTH = 6
    FORMAT_SINGLE_TRACK = 0

    DATA_MASK = 0x7F

    DEFAULT_BPM = 120
    DEFAULT_BEATS_PER_CHORD = 2
    MICROSECONDS_PER_MINUTE = 60000000
    TEMPO_MAX = 0xFFFFFF


# ============================================================================
# REGISTERS
# ============================================================================
class Register:
    """Register presets and the base octave each one maps to."""
    SUB = "Sub"
    BASS = "Bass"
    MID = "Mid"
    HARMONY = "Harmony"

    # Octaves used when writing a file
    EXPORT_OCTAVES = {SUB: 1, BASS: 2, MID: 3, HARMONY: 4}

    # Octaves used for live playback (Harmony sits an octave higher)
    PLAYBACK_OCTAVES = {SUB: 1, BASS: 2, MID: 3, HARMONY: 5}

    ALL = [SUB, BASS, MID, HARMONY]


# ============================================================================
# VOICING STYLES
# ============================================================================
class VoicingStyle:
    """Voicing styles understood by the exporter."""
    ROOT_ONLY = "Root Only"
    ROOT_FIFTH = "Root + 5th"
    ROOT_TENTH = "Root + 10th"
    TRIAD = "Triad"

    ALL = [ROOT_ONLY, ROOT_FIFTH, ROOT_TENTH, TRIAD]


# ============================================================================
# PLAYBACK
# ============================================================================
class Playback:
    """Timing defaults handed to the external scheduler."""
    VELOCITY = 96
    RELEASE_VELOCITY = 64
    STAGGER_MS = 5


# ============================================================================
# SUGGESTION SCORING
# ============================================================================
class Confidence:
    """Fixed confidences and weights used by the suggestion strategies."""
    MIN = 0.0
    MAX = 1.0

    # Key tracker
    KEY_HISTORY_SIZE = 10
    KEY_TOP_N = 5
    KEY_ROOT_BONUS = 0.15

    # Scales
    PARENT_SCALE_BONUS = 0.2
    NO_CHORD_FIT = 0.5

    # Modal stack suggestions
    MODAL_MODIFIER = 0.6

    # Modal next-chord suggestions
    MODAL_REPEAT_PENALTY = 0.2

    # Progression continuation
    REPEAT_PENALTY = 0.35
    RECENT_PENALTY = 0.1
    VOICE_LEADING_WEIGHT = 0.05
    NEXT_CHORD_LIMIT = 5
    DEFAULT_MEMORY = 3
