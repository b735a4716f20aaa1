"""Unit tests for the pitch map (notes, tunings, interval kinds)."""

import pytest

from fretmap.pitch_map import (
    NOTE_NAMES,
    STANDARD_STEPS,
    FretRangeError,
    IntervalKind,
    Note,
    Tuning,
    TuningError,
    build_standard_tuning,
    fret_table,
    get_tuning,
    interval_kind,
    note_at,
    semitone_step,
    tuning_from_midi,
    tuning_from_steps,
)

# Standard EADGBE, lowest string first, frets 0..12
STANDARD_TABLE = [
    "E2 F2 F#2 G2 G#2 A2 A#2 B2 C3 C#3 D3 D#3 E3",
    "A2 A#2 B2 C3 C#3 D3 D#3 E3 F3 F#3 G3 G#3 A3",
    "D3 D#3 E3 F3 F#3 G3 G#3 A3 A#3 B3 C4 C#4 D4",
    "G3 G#3 A3 A#3 B3 C4 C#4 D4 D#4 E4 F4 F#4 G4",
    "B3 C4 C#4 D4 D#4 E4 F4 F#4 G4 G#4 A4 A#4 B4",
    "E4 F4 F#4 G4 G#4 A4 A#4 B4 C5 C#5 D5 D#5 E5",
]


def test_standard_tuning_open_strings() -> None:
    tuning = build_standard_tuning()
    assert [str(n) for n in tuning.open_notes] == ["E2", "A2", "D3", "G3", "B3", "E4"]


def test_standard_tuning_step_pattern() -> None:
    tuning = build_standard_tuning()
    assert tuning.steps == (5, 5, 5, 4, 5)
    assert tuning.steps == STANDARD_STEPS
    assert tuning.offsets[0] == 4


def test_note_at_low_string_open_and_octave() -> None:
    tuning = build_standard_tuning()
    assert str(note_at(tuning, 0, 0)) == "E2"
    assert str(note_at(tuning, 0, 12)) == "E3"


def test_note_at_highest_string_open() -> None:
    assert str(note_at(build_standard_tuning(), 5, 0)) == "E4"


def test_note_at_octave_changes_at_c() -> None:
    tuning = build_standard_tuning()
    assert str(note_at(tuning, 0, 7)) == "B2"
    assert str(note_at(tuning, 0, 8)) == "C3"
    assert str(note_at(tuning, 4, 1)) == "C4"


@pytest.mark.parametrize("string_index", range(6))
def test_note_at_advances_one_semitone_per_fret(string_index: int) -> None:
    tuning = build_standard_tuning()
    notes = [note_at(tuning, string_index, fret) for fret in range(13)]
    for lower, upper in zip(notes, notes[1:]):
        assert upper.pitch_class == (lower.pitch_class + 1) % 12
        assert upper.midi == lower.midi + 1
        expected_octave = lower.octave + 1 if upper.pitch_class == 0 else lower.octave
        assert upper.octave == expected_octave


def test_rebuilt_tuning_matches_hand_table() -> None:
    rebuilt = tuning_from_steps(NOTE_NAMES.index("E"), [5, 5, 5, 4, 5])
    table = fret_table(rebuilt)
    assert [" ".join(str(n) for n in row) for row in table] == STANDARD_TABLE


def test_note_at_is_deterministic() -> None:
    tuning = build_standard_tuning()
    assert note_at(tuning, 3, 7) == note_at(tuning, 3, 7)


@pytest.mark.parametrize("string_index, fret", [(-1, 0), (6, 0), (0, -1), (0, 13)])
def test_note_at_out_of_range_raises(string_index: int, fret: int) -> None:
    with pytest.raises(FretRangeError):
        note_at(build_standard_tuning(), string_index, fret)


def test_note_at_rejects_non_int_fret() -> None:
    with pytest.raises(FretRangeError):
        note_at(build_standard_tuning(), 0, 1.5)  # type: ignore[arg-type]


def test_note_at_extended_fret_count() -> None:
    assert str(note_at(build_standard_tuning(), 0, 24, fret_count=24)) == "E4"


def test_fret_range_error_is_value_error() -> None:
    assert issubclass(FretRangeError, ValueError)
    assert issubclass(TuningError, ValueError)


def test_tuning_wrong_length_raises() -> None:
    with pytest.raises(TuningError):
        Tuning(offsets=(4, 9, 2, 7, 11))


@pytest.mark.parametrize("offset", [12, -1, "E"])
def test_tuning_out_of_range_offset_raises(offset: object) -> None:
    with pytest.raises(TuningError):
        Tuning(offsets=(4, 9, 2, 7, 11, offset))  # type: ignore[arg-type]


def test_tuning_base_octave_length_mismatch_raises() -> None:
    with pytest.raises(TuningError):
        Tuning(offsets=(4, 9, 2, 7, 11, 4), base_octaves=(2, 2, 3))


def test_tuning_without_octaves_uses_heuristic_table() -> None:
    tuning = Tuning(offsets=[4, 9, 2, 7, 11, 4])  # type: ignore[arg-type]
    assert tuning.offsets == (4, 9, 2, 7, 11, 4)
    assert tuning.base_octaves == (2, 2, 3, 3, 4, 4)


def test_tuning_caller_supplied_octaves() -> None:
    tuning = Tuning(offsets=(4, 9, 2, 7, 11, 4), base_octaves=(1, 1, 2, 2, 2, 3))
    assert str(note_at(tuning, 0, 0)) == "E1"
    assert str(note_at(tuning, 5, 0)) == "E3"


def test_interval_kind_classification() -> None:
    assert interval_kind(1) is IntervalKind.HALF_STEP
    assert interval_kind(2) is IntervalKind.WHOLE_STEP
    assert interval_kind(5) is IntervalKind.OTHER
    assert interval_kind(0) is IntervalKind.OTHER


def test_semitone_step_wraps() -> None:
    assert semitone_step(11, 0) == 1
    assert semitone_step(4, 9) == 5
    assert semitone_step(9, 4) == 7


def test_note_midi_and_frequency() -> None:
    a4 = Note.parse("A4")
    assert a4.midi == 69
    assert a4.frequency == pytest.approx(440.0)
    assert Note.parse("E2").frequency == pytest.approx(82.41, abs=0.01)


def test_note_from_midi_round_trips_name() -> None:
    assert str(Note.from_midi(61)) == "C#4"
    assert Note.from_midi(Note.parse("G#3").midi) == Note.parse("G#3")


def test_note_parse_rejects_flats() -> None:
    with pytest.raises(ValueError):
        Note.parse("Bb3")


def test_presets() -> None:
    assert get_tuning(None) == build_standard_tuning()
    assert get_tuning("Drop-D").open_notes[0] == Note.parse("D2")
    assert [str(n) for n in get_tuning("dadgad").open_notes] == ["D2", "A2", "D3", "G3", "A3", "D4"]


def test_unknown_preset_raises() -> None:
    with pytest.raises(TuningError, match="Unknown tuning"):
        get_tuning("nashville")


def test_tuning_from_midi_matches_standard() -> None:
    assert tuning_from_midi([40, 45, 50, 55, 59, 64]) == build_standard_tuning()


@pytest.mark.parametrize("offsets", [None, 4, object()])
def test_tuning_non_sequence_offsets_raise(offsets: object) -> None:
    with pytest.raises(TuningError, match="Offsets must be a sequence"):
        Tuning(offsets=offsets)  # type: ignore[arg-type]


def test_tuning_non_sequence_base_octaves_raise() -> None:
    with pytest.raises(TuningError, match="Base octaves must be a sequence"):
        Tuning(offsets=(4, 9, 2, 7, 11, 4), base_octaves=5)  # type: ignore[arg-type]
