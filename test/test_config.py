"""
Unit tests for export/session options and YAML loading.

Run with: python -m pytest test/test_config.py
     or: python test/test_config.py
"""
import os
import sys
import tempfile

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "src", "lib"))

from harmony_assist.config import (
    ConfigError,
    ExportOptions,
    SessionOptions,
    export_options_from,
    load_options,
    session_options_from,
)


def raises_config_error(func, *args, **kwargs):
    try:
        func(*args, **kwargs)
    except ConfigError:
        return True
    return False


def write_yaml(directory, text):
    path = os.path.join(directory, "options.yaml")
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    return path


class TestExportOptions:
    """Tests for ExportOptions."""

    def test_defaults(self):
        options = ExportOptions()
        assert options.bpm == 120
        assert options.beats_per_chord == 2
        assert options.velocity == 100
        assert options.voicing_style == "Triad"
        assert options.resolved_octave() == 4
        assert options.ticks_per_chord == 960

    def test_octave_resolution(self):
        assert ExportOptions(octave=2).resolved_octave() == 2
        assert ExportOptions(register="Mid").resolved_octave() == 3
        assert ExportOptions(register="Harmony", octave=6).resolved_octave() == 4

    def test_fractional_beats(self):
        assert ExportOptions(beats_per_chord=1.5).ticks_per_chord == 720

    def test_validation(self):
        assert raises_config_error(ExportOptions, bpm=0)
        assert raises_config_error(ExportOptions, bpm=-10)
        assert raises_config_error(ExportOptions, beats_per_chord=-1)
        assert raises_config_error(ExportOptions, register="Treble")

    def test_bpm_must_fit_a_tempo_event(self):
        assert raises_config_error(ExportOptions, bpm=3)
        assert raises_config_error(ExportOptions, bpm=0.5)
        assert ExportOptions(bpm=4).bpm == 4

    def test_option_types(self):
        assert raises_config_error(ExportOptions, bpm="fast")
        assert raises_config_error(ExportOptions, beats_per_chord=None)
        assert raises_config_error(ExportOptions, velocity="loud")
        assert raises_config_error(ExportOptions, velocity=80.5)
        assert raises_config_error(ExportOptions, velocity=True)
        assert raises_config_error(ExportOptions, octave="4")
        assert raises_config_error(ExportOptions, voicing_style=3)

    def test_config_error_is_a_value_error(self):
        assert issubclass(ConfigError, ValueError)

    def test_from_mapping_ignores_unknown_keys(self):
        options = export_options_from({"bpm": 90, "swing": 0.2})
        assert options.bpm == 90

    def test_from_existing_options(self):
        options = ExportOptions(bpm=70)
        assert export_options_from(options) is options
        assert export_options_from(None) == ExportOptions()

    def test_from_non_mapping(self):
        assert raises_config_error(export_options_from, ["bpm", 90])


class TestSessionOptions:
    """Tests for SessionOptions."""

    def test_defaults(self):
        options = SessionOptions()
        assert options.memory_length == 3
        assert options.allow_repeat is False
        assert options.key_history == 10

    def test_validation(self):
        assert raises_config_error(SessionOptions, key_history=0)

    def test_from_mapping(self):
        assert session_options_from({"allow_repeat": True}).allow_repeat is True


class TestLoadOptions:
    """Tests for load_options."""

    def test_both_sections(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = write_yaml(
                tmp,
                "export:\n"
                "  bpm: 96\n"
                "  register: Bass\n"
                "  voicing_style: Root + 5th\n"
                "session:\n"
                "  memory_length: 4\n",
            )
            export, session = load_options(path)
        assert export == ExportOptions(bpm=96, register="Bass", voicing_style="Root + 5th")
        assert session.memory_length == 4

    def test_missing_sections_use_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            export, session = load_options(write_yaml(tmp, "session:\n  allow_repeat: true\n"))
        assert export == ExportOptions()
        assert session.allow_repeat is True

    def test_empty_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            export, session = load_options(write_yaml(tmp, ""))
        assert export == ExportOptions()
        assert session == SessionOptions()

    def test_invalid_yaml(self):
        with tempfile.TemporaryDirectory() as tmp:
            assert raises_config_error(load_options, write_yaml(tmp, "export: [unclosed\n"))

    def test_top_level_must_be_a_mapping(self):
        with tempfile.TemporaryDirectory() as tmp:
            assert raises_config_error(load_options, write_yaml(tmp, "- 1\n- 2\n"))

    def test_wrongly_typed_value(self):
        with tempfile.TemporaryDirectory() as tmp:
            assert raises_config_error(load_options, write_yaml(tmp, "export:\n  velocity: loud\n"))

    def test_out_of_range_value(self):
        with tempfile.TemporaryDirectory() as tmp:
            assert raises_config_error(load_options, write_yaml(tmp, "export:\n  bpm: 0\n"))


def run_tests():
    """Run all tests and report results."""
    from run_tests import run_test_classes

    return run_test_classes([TestExportOptions, TestSessionOptions, TestLoadOptions])


if __name__ == "__main__":
    sys.exit(0 if run_tests() else 1)
