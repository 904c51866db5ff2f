#!/usr/bin/env python3
"""
Analyse chord progressions and export them as MIDI files from the shell.

Examples:
    python src/plat_computer/progression_tool.py detect 60 64 67
    python src/plat_computer/progression_tool.py analyze "D Minor" "G Major" "C Major"
    python src/plat_computer/progression_tool.py export "C Major" "A Minor" -o out.mid --bpm 90
"""

import argparse
import logging
import os
import sys

# Make the library importable when run from a source checkout
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "lib"))

from harmony_assist import (  # noqa: E402
    ConfigError,
    ExportOptions,
    KeyTracker,
    detect_chord,
    detect_mode_from_chords,
    load_options,
    midi_to_note_name,
    save_progression,
    suggest_intervals,
    suggest_modal_next_chords,
    suggest_next_chords,
)
from harmony_assist.constants import Register, VoicingStyle  # noqa: E402


def print_suggestions(title, suggestions):
    print(title)
    if not suggestions:
        print("  (none)")
    for s in suggestions:
        print(f"  {s.name:<22} {s.function:<12} {s.confidence:.2f}")


def cmd_detect(args):
    """Name the chord formed by note numbers."""
    names = " ".join(midi_to_note_name(n) for n in args.notes)
    chord = detect_chord(args.notes)
    print(f"Notes: {names}")
    print(f"Chord: {chord or '-'}")
    if chord is None:
        for s in suggest_intervals(args.notes):
            print(f"  {s.interval:>3} {s.name:<8} -> {s.result}")
    return 0


def cmd_analyze(args):
    """Infer key and mode from a progression and suggest what comes next."""
    tracker = KeyTracker()
    for chord in args.chords:
        tracker.add_chord(chord)

    keys = tracker.detect()
    if not keys:
        print("No recognizable chords.")
        return 1

    print("Key estimates:")
    for k in keys:
        print(f"  {k.root} {k.scale:<22} {k.score:.2f}")

    key = f"{keys[0].root} {keys[0].scale}"
    print_suggestions(f"Next chords in {key}:", suggest_next_chords(args.chords, key, args.memory))

    mode = detect_mode_from_chords(args.chords)
    if mode is not None:
        print(f"Mode: {mode.tonic} {mode.mode} ({mode.confidence:.2f})")
        print_suggestions("Modal next chords:", suggest_modal_next_chords(mode.mode, mode.tonic, args.chords[-1]))
    return 0


def cmd_export(args):
    """Write a progression to a Standard MIDI File."""
    if args.config:
        options, _ = load_options(args.config)
    else:
        options = ExportOptions()

    overrides = {
        "bpm": args.bpm,
        "beats_per_chord": args.beats,
        "velocity": args.velocity,
        "register": args.register,
        "octave": args.octave,
        "voicing_style": args.voicing,
    }
    fields = dict(vars(options))
    fields.update({k: v for k, v in overrides.items() if v is not None})
    options = ExportOptions(**fields)

    written = save_progression(args.output, args.chords, options)
    if not written:
        print("Nothing to export.")
        return 1
    print(f"Wrote {written} bytes to {args.output}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    sub = parser.add_subparsers(dest="command", required=True)

    detect = sub.add_parser("detect", help="Detect a chord from MIDI note numbers")
    detect.add_argument("notes", nargs="+", type=int)
    detect.set_defaults(func=cmd_detect)

    analyze = sub.add_parser("analyze", help="Infer key/mode and suggest next chords")
    analyze.add_argument("chords", nargs="+", help='Chord labels such as "C Major"')
    analyze.add_argument("--memory", type=int, default=3, help="Recency window for next-chord scoring")
    analyze.set_defaults(func=cmd_analyze)

    export = sub.add_parser("export", help="Export chords to a .mid file")
    export.add_argument("chords", nargs="+", help='Chord labels such as "C Major"')
    export.add_argument("-o", "--output", required=True)
    export.add_argument("--config", help="YAML file with an 'export' section")
    export.add_argument("--bpm", type=float)
    export.add_argument("--beats", type=float, help="Beats per chord")
    export.add_argument("--velocity", type=int)
    export.add_argument("--register", choices=Register.ALL)
    export.add_argument("--octave", type=int)
    export.add_argument("--voicing", choices=VoicingStyle.ALL)
    export.set_defaults(func=cmd_export)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except ConfigError as e:
        print(f"Error: {e}")
        return 1
    except OSError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
