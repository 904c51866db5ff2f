"""
Standard MIDI File export of a chord progression.

Produces a single-track format-0 file at 480 ticks per beat: a tempo event,
then for every chord all note-ons at once followed by all note-offs after
the chord's duration, then end-of-track. Every channel message is written
in full (no running status).
"""
import io
import logging
import struct

import mido

from .config import export_options_from
from .constants import Midi, Register, VoicingStyle
from .music_theory import INTERVALS, parse_chord_label
from .suggestion_engine import get_chord_metadata

logger = logging.getLogger(__name__)

TICKS_PER_BEAT = Midi.TICKS_PER_BEAT
REGISTER_OCTAVES = dict(Register.EXPORT_OCTAVES)

MAJOR_TENTH = INTERVALS["octave"] + INTERVALS["major_third"]
MINOR_TENTH = INTERVALS["octave"] + INTERVALS["minor_third"]


def build_voicing(label, style, octave):
    """
    Voice a chord for export.

    Args:
        label: chord label, e.g. "A Minor"
        style: one of VoicingStyle.ALL; anything else voices the full chord
        octave: octave of the root

    Returns:
        List of MIDI note numbers, or None when the chord cannot be resolved
    """
    meta = get_chord_metadata(label, octave)
    if meta is None or not meta.midi_notes:
        return None

    root = meta.midi_notes[0]
    if style == VoicingStyle.ROOT_ONLY:
        return [root]
    if style == VoicingStyle.ROOT_FIFTH:
        return [root, root + INTERVALS["perfect_fifth"]]
    if style == VoicingStyle.ROOT_TENTH:
        quality = parse_chord_label(label).quality_string.lower()
        is_minor = "minor" in quality or "min" in quality
        return [root, root + (MINOR_TENTH if is_minor else MAJOR_TENTH)]
    return list(meta.midi_notes)


def encode_variable_length(value):
    """
    Encode a delta-time as a MIDI variable-length quantity.

    Seven bits per byte, most significant first, continuation bit on every
    byte but the last. Negative values are written as 0.
    """
    value = max(0, int(value))
    encoded = [value & 0x7F]
    value >>= 7
    while value:
        encoded.insert(0, (value & 0x7F) | 0x80)
        value >>= 7
    return bytes(encoded)


def _event(delta, message):
    return encode_variable_length(delta) + bytes(message.bytes())


def _note_on(note, velocity):
    return mido.Message("note_on", note=note & Midi.DATA_MASK, velocity=velocity & Midi.DATA_MASK)


def _note_off(note):
    return mido.Message("note_off", note=note & Midi.DATA_MASK, velocity=Midi.RELEASE_VELOCITY)


def _track_data(progression, options):
    octave = options.resolved_octave()
    duration = options.ticks_per_chord
    tempo = mido.bpm2tempo(options.bpm)

    data = bytearray(_event(0, mido.MetaMessage("set_tempo", tempo=tempo)))
    for label in progression:
        notes = build_voicing(label, options.voicing_style, octave)
        if not notes:
            logger.debug("Skipping unresolvable chord %r", label)
            continue
        for note in notes:
            data += _event(0, _note_on(note, options.velocity))
        for index, note in enumerate(notes):
            data += _event(duration if index == 0 else 0, _note_off(note))
    data += _event(0, mido.MetaMessage("end_of_track"))
    return bytes(data)


def export_progression_to_midi(progression, options=None):
    """
    Encode a chord progression as a Standard MIDI File.

    Args:
        progression: sequence of chord labels, played in order
        options: ExportOptions, a mapping of its fields, or None for
            defaults (120 bpm, 2 beats per chord, velocity 100, octave 4,
            "Triad" voicing)

    Returns:
        The file as bytes; empty for an empty progression
    """
    if not isinstance(progression, (list, tuple)) or not progression:
        return b""
    options = export_options_from(options)

    track = _track_data(progression, options)
    header = struct.pack(
        ">4sIHHH",
        Midi.HEADER_TAG,
        Midi.HEADER_LENGTH,
        Midi.FORMAT_SINGLE_TRACK,
        1,
        TICKS_PER_BEAT,
    )
    chunk = struct.pack(">4sI", Midi.TRACK_TAG, len(track))
    logger.debug("Exported %d chords into %d bytes", len(progression), len(header) + len(chunk) + len(track))
    return header + chunk + track


def progression_to_midi_file(progression, options=None):
    """Export a progression and read it back as a mido.MidiFile, or None."""
    data = export_progression_to_midi(progression, options)
    if not data:
        return None
    return mido.MidiFile(file=io.BytesIO(data))


def save_progression(path, progression, options=None):
    """
    Write a progression to a .mid file.

    Returns:
        Number of bytes written (0 and no file for an empty progression)
    """
    data = export_progression_to_midi(progression, options)
    if not data:
        return 0
    with open(path, "wb") as f:
        f.write(data)
    return len(data)
