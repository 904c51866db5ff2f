"""
Harmony Assist - chord detection, key/mode inference, harmonic suggestions
and Standard MIDI File export. Pure logic, no device or UI dependencies.
"""

from .music_theory import (
    INTERVALS,
    SCALES,
    NOTE_NAMES,
    CHORD_TYPES,
    MODAL_MODIFIERS,
    ChordLabel,
    get_scale_names,
    get_scale_degrees,
    note_name,
    note_to_pitch_class,
    midi_to_note_name,
    parse_chord_label,
)
from .chord_detector import detect_chord
from .key_tracker import KeyTracker, KeyEstimate
from .modal_context import (
    MODES,
    ModalEstimate,
    detect_mode_from_chords,
    suggest_modal_next_chords,
)
from .suggestion_engine import (
    Suggestion,
    IntervalSuggestion,
    ChordMetadata,
    suggest_diatonic_chords,
    suggest_scales,
    suggest_extensions,
    suggest_intervals,
    suggest_next_chords,
    get_chord_metadata,
    apply_extension,
    calculate_voice_leading_cost,
)
from .midi_exporter import (
    TICKS_PER_BEAT,
    build_voicing,
    export_progression_to_midi,
    progression_to_midi_file,
    save_progression,
)
from .playback import PlaybackEvent, build_playback_schedule, to_mido_messages
from .config import ConfigError, ExportOptions, SessionOptions, load_options
from .analysis_session import AnalysisSession, AnalysisSnapshot, Event

__all__ = [
    # Music Theory
    "INTERVALS",
    "SCALES",
    "NOTE_NAMES",
    "CHORD_TYPES",
    "MODAL_MODIFIERS",
    "ChordLabel",
    "get_scale_names",
    "get_scale_degrees",
    "note_name",
    "note_to_pitch_class",
    "midi_to_note_name",
    "parse_chord_label",
    # Detection
    "detect_chord",
    "KeyTracker",
    "KeyEstimate",
    "MODES",
    "ModalEstimate",
    "detect_mode_from_chords",
    "suggest_modal_next_chords",
    # Suggestions
    "Suggestion",
    "IntervalSuggestion",
    "ChordMetadata",
    "suggest_diatonic_chords",
    "suggest_scales",
    "suggest_extensions",
    "suggest_intervals",
    "suggest_next_chords",
    "get_chord_metadata",
    "apply_extension",
    "calculate_voice_leading_cost",
    # Export & playback
    "TICKS_PER_BEAT",
    "build_voicing",
    "export_progression_to_midi",
    "progression_to_midi_file",
    "save_progression",
    "PlaybackEvent",
    "build_playback_schedule",
    "to_mido_messages",
    # Configuration
    "ConfigError",
    "ExportOptions",
    "SessionOptions",
    "load_options",
    # Session
    "AnalysisSession",
    "AnalysisSnapshot",
    "Event",
]
