"""PitchMap: maps (string, fret) positions on a fretted instrument to notes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Final, Iterable, Sequence

# ── Pitch constants ─────────────────────────────────────────────────────────
SEMITONES_PER_OCTAVE: Final[int] = 12
A4_MIDI: Final[int] = 69
A4_FREQUENCY: Final[float] = 440.0

#: Chromatic pitch class names, sharps only (index 0 = C)
NOTE_NAMES: Final[list[str]] = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

STRING_COUNT: Final[int] = 6
FRET_COUNT: Final[int] = 12

#: Semitone steps between adjacent strings, lowest string first:
#: perfect fourths everywhere except the major third from G to B.
STANDARD_STEPS: Final[tuple[int, ...]] = (5, 5, 5, 4, 5)

_NOTE_RE = re.compile(r"^([A-G]#?)(-?\d+)$")


class TuningError(ValueError):
    """Raised when a tuning definition is malformed."""


class FretRangeError(ValueError):
    """Raised when a string index or fret number falls outside the board."""


class IntervalKind(Enum):
    """Classification of a semitone step between two fret positions."""

    HALF_STEP = "half"
    WHOLE_STEP = "whole"
    OTHER = "other"


def pitch_class_to_midi(pitch_class: int, octave: int) -> int:
    """
    Convert a pitch class (0-11) and an octave number to an absolute MIDI note.

    MIDI octave numbering: C-1 = 0, C0 = 12, C1 = 24, ... C4 (Middle C) = 60.
    """
    return (octave + 1) * SEMITONES_PER_OCTAVE + pitch_class


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class Note:
    """
    A sounding pitch: a sharp-spelled pitch class plus a scientific octave.

    Attributes:
        pitch_class: 0=C, 1=C#, ..., 11=B.
        octave:      Scientific octave number (E2 is the low guitar string).
    """

    pitch_class: int
    octave: int

    def __post_init__(self) -> None:
        if not _is_int(self.pitch_class) or not 0 <= self.pitch_class < SEMITONES_PER_OCTAVE:
            raise ValueError(f"Pitch class must be an int in 0..11, got {self.pitch_class!r}.")
        if not _is_int(self.octave):
            raise ValueError(f"Octave must be an int, got {self.octave!r}.")

    @classmethod
    def from_midi(cls, midi: int) -> "Note":
        octave, pitch_class = divmod(midi, SEMITONES_PER_OCTAVE)
        return cls(pitch_class=pitch_class, octave=octave - 1)

    @classmethod
    def parse(cls, text: str) -> "Note":
        """Parse a note such as ``"C#3"`` or ``"E2"``."""
        match = _NOTE_RE.match(text.strip())
        if not match:
            raise ValueError(f"Cannot parse note '{text}'. Expected e.g. 'E2' or 'C#3'.")
        return cls(pitch_class=NOTE_NAMES.index(match.group(1)), octave=int(match.group(2)))

    @property
    def name(self) -> str:
        """Pitch class name without octave, e.g. 'F#'."""
        return NOTE_NAMES[self.pitch_class]

    @property
    def midi(self) -> int:
        return pitch_class_to_midi(self.pitch_class, self.octave)

    @property
    def frequency(self) -> float:
        """Equal-tempered frequency in Hz (A4 = 440 Hz)."""
        return A4_FREQUENCY * 2 ** ((self.midi - A4_MIDI) / SEMITONES_PER_OCTAVE)

    def __str__(self) -> str:
        return f"{self.name}{self.octave}"


@dataclass(frozen=True)
class FretPosition:
    """A (string, fret) pair; fret 0 is the open string."""

    string_index: int
    fret: int


def heuristic_base_octaves(string_count: int) -> tuple[int, ...]:
    """
    Approximate open-string octaves: two strings per octave starting at 2.

    Only a fallback for tunings built without an explicit octave table; it
    puts the B string of standard tuning an octave too high.
    """
    return tuple(2 + i // 2 for i in range(string_count))


@dataclass(frozen=True)
class Tuning:
    """
    Open pitch class and octave of every string, lowest string first.

    Attributes:
        offsets:      Open-string pitch classes (0-11).
        base_octaves: Octave of each open string. Defaults to
                      :func:`heuristic_base_octaves` when omitted.
    """

    offsets: tuple[int, ...]
    base_octaves: tuple[int, ...] | None = None

    def __post_init__(self) -> None:
        try:
            offsets = tuple(self.offsets)
        except TypeError as exc:
            raise TuningError(f"Offsets must be a sequence, got {self.offsets!r}.") from exc
        if len(offsets) != STRING_COUNT:
            raise TuningError(f"A tuning needs {STRING_COUNT} strings, got {len(offsets)}.")
        for offset in offsets:
            if not _is_int(offset) or not 0 <= offset < SEMITONES_PER_OCTAVE:
                raise TuningError(f"Open-string offsets must be ints in 0..11, got {offset!r}.")

        if self.base_octaves is None:
            octaves = heuristic_base_octaves(len(offsets))
        else:
            try:
                octaves = tuple(self.base_octaves)
            except TypeError as exc:
                raise TuningError(
                    f"Base octaves must be a sequence, got {self.base_octaves!r}."
                ) from exc
        if len(octaves) != len(offsets):
            raise TuningError(
                f"Expected {len(offsets)} base octaves, got {len(octaves)}."
            )
        if not all(_is_int(octave) for octave in octaves):
            raise TuningError(f"Base octaves must be ints, got {octaves!r}.")

        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "offsets", offsets)
        object.__setattr__(self, "base_octaves", octaves)

    @property
    def string_count(self) -> int:
        return len(self.offsets)

    @property
    def steps(self) -> tuple[int, ...]:
        """Semitone steps between adjacent strings, mod 12."""
        return tuple(
            semitone_step(low, high) for low, high in zip(self.offsets, self.offsets[1:])
        )

    @property
    def open_notes(self) -> tuple[Note, ...]:
        return tuple(
            Note(pitch_class=offset, octave=octave)
            for offset, octave in zip(self.offsets, self.octaves)
        )

    @property
    def open_midi(self) -> tuple[int, ...]:
        return tuple(note.midi for note in self.open_notes)

    @property
    def octaves(self) -> tuple[int, ...]:
        # base_octaves is always populated after __post_init__
        return self.base_octaves or ()


def note_at(tuning: Tuning, string_index: int, fret: int, fret_count: int = FRET_COUNT) -> Note:
    """
    Return the note sounded by ``string_index`` stopped at ``fret``.

    The pitch class wraps every 12 frets and the octave of the open string is
    raised each time the running semitone total passes a multiple of 12, so
    octave numbers change at C as in scientific pitch notation.

    Raises:
        FretRangeError: If the string index or fret is outside the board.
    """
    if not _is_int(string_index) or not 0 <= string_index < tuning.string_count:
        raise FretRangeError(
            f"String index must be in 0..{tuning.string_count - 1}, got {string_index!r}."
        )
    if not _is_int(fret) or not 0 <= fret <= fret_count:
        raise FretRangeError(f"Fret must be in 0..{fret_count}, got {fret!r}.")

    total = tuning.offsets[string_index] + fret
    octave_shift, pitch_class = divmod(total, SEMITONES_PER_OCTAVE)
    return Note(pitch_class=pitch_class, octave=tuning.octaves[string_index] + octave_shift)


def tuning_from_steps(
    lowest_pitch_class: int,
    steps: Sequence[int],
    lowest_octave: int = 2,
) -> Tuning:
    """
    Build a tuning from the lowest open string and the steps above it.

    Base octaves follow from the accumulated absolute pitch, so the result is
    exact rather than relying on the heuristic octave table.
    """
    if not _is_int(lowest_pitch_class) or not 0 <= lowest_pitch_class < SEMITONES_PER_OCTAVE:
        raise TuningError(f"Lowest pitch class must be in 0..11, got {lowest_pitch_class!r}.")
    if any(not _is_int(step) or step < 0 for step in steps):
        raise TuningError(f"Steps must be non-negative ints, got {list(steps)!r}.")

    pitches = [pitch_class_to_midi(lowest_pitch_class, lowest_octave)]
    for step in steps:
        pitches.append(pitches[-1] + step)
    return tuning_from_midi(pitches)


def tuning_from_midi(open_pitches: Iterable[int]) -> Tuning:
    """Build a tuning from absolute MIDI pitches of the open strings, lowest first."""
    notes = [Note.from_midi(int(pitch)) for pitch in open_pitches]
    return Tuning(
        offsets=tuple(note.pitch_class for note in notes),
        base_octaves=tuple(note.octave for note in notes),
    )


def build_standard_tuning() -> Tuning:
    """Standard guitar tuning, E2 A2 D3 G3 B3 E4."""
    return tuning_from_steps(NOTE_NAMES.index("E"), STANDARD_STEPS, lowest_octave=2)


# Open-string MIDI pitches, lowest string first
TUNING_PRESETS: Final[dict[str, tuple[int, ...]]] = {
    "standard": (40, 45, 50, 55, 59, 64),        # E2 A2 D3 G3 B3 E4
    "drop_d": (38, 45, 50, 55, 59, 64),          # D2 A2 D3 G3 B3 E4
    "open_g": (38, 43, 50, 55, 59, 62),          # D2 G2 D3 G3 B3 D4
    "dadgad": (38, 45, 50, 55, 57, 62),          # D2 A2 D3 G3 A3 D4
    "half_step_down": (39, 44, 49, 54, 58, 63),  # D#2 G#2 C#3 F#3 A#3 D#4
}


def get_tuning(name: str | None) -> Tuning:
    """Look up a preset by name (case and ``-``/``_`` insensitive)."""
    if not name:
        return build_standard_tuning()
    key = name.strip().lower().replace("-", "_")
    if key not in TUNING_PRESETS:
        known = ", ".join(sorted(TUNING_PRESETS))
        raise TuningError(f"Unknown tuning '{name}'. Use one of: {known}.")
    return tuning_from_midi(TUNING_PRESETS[key])


def fret_table(tuning: Tuning, fret_count: int = FRET_COUNT) -> list[list[Note]]:
    """Every note on the board: one row per string, frets 0..fret_count."""
    return [
        [note_at(tuning, string_index, fret, fret_count) for fret in range(fret_count + 1)]
        for string_index in range(tuning.string_count)
    ]


def semitone_step(from_pitch_class: int, to_pitch_class: int) -> int:
    """Upward distance between two pitch classes, 0..11."""
    return (to_pitch_class - from_pitch_class) % SEMITONES_PER_OCTAVE


def interval_kind(step: int) -> IntervalKind:
    """Classify a step as a half step (1), whole step (2), or anything else."""
    if step == 1:
        return IntervalKind.HALF_STEP
    if step == 2:
        return IntervalKind.WHOLE_STEP
    return IntervalKind.OTHER
