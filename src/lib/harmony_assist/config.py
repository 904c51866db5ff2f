"""
Runtime options for exporting and analysing.

Options are plain dataclasses with defaults taken from constants.py. They
can be loaded from a YAML file with two optional sections:

    export:
      bpm: 96
      beats_per_chord: 4
      register: Bass
      voicing_style: Root + 5th
    session:
      memory_length: 4
"""
import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import yaml

from .constants import Confidence, Midi, Music, Register, VoicingStyle


class ConfigError(ValueError):
    """Raised for unreadable or out-of-range options."""


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class ExportOptions:
    bpm: float = Midi.DEFAULT_BPM
    beats_per_chord: float = Midi.DEFAULT_BEATS_PER_CHORD
    velocity: int = Midi.VELOCITY_DEFAULT
    register: Optional[str] = None
    octave: Optional[int] = None
    voicing_style: str = VoicingStyle.TRIAD

    def __post_init__(self):
        if not _is_number(self.bpm) or self.bpm <= 0:
            raise ConfigError(f"bpm must be positive, got {self.bpm!r}")
        # The tempo meta event holds microseconds per beat in 3 bytes
        if round(Midi.MICROSECONDS_PER_MINUTE / self.bpm) > Midi.TEMPO_MAX:
            raise ConfigError(f"bpm {self.bpm!r} is too slow for a MIDI tempo event")
        if not _is_number(self.beats_per_chord) or self.beats_per_chord < 0:
            raise ConfigError(f"beats_per_chord must not be negative, got {self.beats_per_chord!r}")
        if not _is_int(self.velocity):
            raise ConfigError(f"velocity must be an integer, got {self.velocity!r}")
        if self.octave is not None and not _is_int(self.octave):
            raise ConfigError(f"octave must be an integer, got {self.octave!r}")
        if not isinstance(self.voicing_style, str):
            raise ConfigError(f"voicing_style must be a string, got {self.voicing_style!r}")
        if self.register is not None and self.register not in Register.ALL:
            raise ConfigError(f"unknown register {self.register!r}, expected one of {Register.ALL}")

    def resolved_octave(self) -> int:
        """Register preset first, then the explicit octave, then octave 4."""
        if self.register in Register.EXPORT_OCTAVES:
            return Register.EXPORT_OCTAVES[self.register]
        if self.octave is not None:
            return self.octave
        return Music.DEFAULT_OCTAVE

    @property
    def ticks_per_chord(self) -> int:
        return int(round(self.beats_per_chord * Midi.TICKS_PER_BEAT))


@dataclass
class SessionOptions:
    memory_length: int = Confidence.DEFAULT_MEMORY
    allow_repeat: bool = False
    key_history: int = Confidence.KEY_HISTORY_SIZE

    def __post_init__(self):
        if self.key_history < 1:
            raise ConfigError(f"key_history must be at least 1, got {self.key_history!r}")


def _build(cls, data: Optional[Dict[str, Any]]):
    """Instantiate an options dataclass from a mapping, ignoring unknown keys."""
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ConfigError(f"{cls.__name__} section must be a mapping, got {type(data).__name__}")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    clean = {k: v for k, v in data.items() if k in valid_fields}
    try:
        return cls(**clean)
    except TypeError as e:
        raise ConfigError(str(e)) from e


def export_options_from(data: Optional[Dict[str, Any]]) -> ExportOptions:
    """ExportOptions from None, an ExportOptions, or a plain mapping."""
    if isinstance(data, ExportOptions):
        return data
    return _build(ExportOptions, data)


def session_options_from(data: Optional[Dict[str, Any]]) -> SessionOptions:
    """SessionOptions from None, a SessionOptions, or a plain mapping."""
    if isinstance(data, SessionOptions):
        return data
    return _build(SessionOptions, data)


def load_options(path: str) -> Tuple[ExportOptions, SessionOptions]:
    """
    Load export and session options from a YAML file.

    Missing sections fall back to defaults.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")

    return _build(ExportOptions, data.get("export")), _build(SessionOptions, data.get("session"))
