"""
Playback schedule for a chord progression.

Turns a progression into timed note events for an external real-time
scheduler. Nothing here waits or starts timers.
"""
from collections import namedtuple

import mido

from .constants import Midi, Music, Playback, Register
from .suggestion_engine import get_chord_metadata

PlaybackEvent = namedtuple("PlaybackEvent", ["time_ms", "kind", "note", "velocity"])

NOTE_ON = "note_on"
NOTE_OFF = "note_off"


def playback_octave(register):
    """Octave used to voice chords for live playback."""
    return Register.PLAYBACK_OCTAVES.get(register, Music.DEFAULT_OCTAVE)


def build_playback_schedule(
    progression,
    bpm=Midi.DEFAULT_BPM,
    beats_per_chord=Midi.DEFAULT_BEATS_PER_CHORD,
    register=None,
    velocity=Playback.VELOCITY,
    stagger_ms=Playback.STAGGER_MS,
):
    """
    Build the timed note events of a progression.

    Each chord starts where the previous one ended. Note-ons inside a chord
    are staggered by stagger_ms per voice; every note-off lands at the end
    of the chord with release velocity 64. Unresolvable chords still take
    their slot in time but emit nothing.

    Returns:
        List of PlaybackEvent sorted by time (stable for equal times)
    """
    if not progression or bpm <= 0:
        return []

    chord_ms = beats_per_chord * 60000.0 / bpm
    octave = playback_octave(register)
    events = []

    for index, label in enumerate(progression):
        start = index * chord_ms
        meta = get_chord_metadata(label, octave)
        if meta is None:
            continue
        for voice, note in enumerate(meta.midi_notes):
            events.append(PlaybackEvent(start + voice * stagger_ms, NOTE_ON, note, velocity))
            events.append(PlaybackEvent(start + chord_ms, NOTE_OFF, note, Playback.RELEASE_VELOCITY))

    events.sort(key=lambda e: e.time_ms)
    return events


def schedule_duration_ms(progression, bpm=Midi.DEFAULT_BPM, beats_per_chord=Midi.DEFAULT_BEATS_PER_CHORD):
    """Total length of a progression in milliseconds."""
    if not progression or bpm <= 0:
        return 0.0
    return len(progression) * beats_per_chord * 60000.0 / bpm


def to_mido_messages(events, channel=0):
    """
    Convert playback events to (time_ms, mido.Message) pairs.

    Args:
        events: PlaybackEvent list from build_playback_schedule
        channel: MIDI channel 0-15
    """
    return [
        (
            event.time_ms,
            mido.Message(
                event.kind,
                channel=channel,
                note=event.note & Midi.DATA_MASK,
                velocity=event.velocity & Midi.DATA_MASK,
            ),
        )
        for event in events
    ]
