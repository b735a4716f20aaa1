"""Data models for fretboard drawings, independent of any rendering surface."""

from dataclasses import dataclass

from fretmap.geometry import FretboardConfig
from fretmap.pitch_map import FretPosition, IntervalKind, Note, Tuning


@dataclass(frozen=True)
class StringLine:
    """One string, drawn across the whole board."""

    string_index: int
    y: float
    stroke_width: float
    open_note: Note


@dataclass(frozen=True)
class FretLine:
    """A fret wire and the number printed under its cell."""

    fret: int
    x: float
    label_x: float


@dataclass(frozen=True)
class InlayMarker:
    """Inlay dot(s) behind a fret."""

    fret: int
    points: list[tuple[float, float]]


@dataclass(frozen=True)
class FretCell:
    """
    A playable (string, fret) spot.

    ``step_kind`` is only set when intervals are shown: the step from the
    previous fret on the same string.
    """

    position: FretPosition
    note: Note
    x: float
    y: float
    played: bool = False
    step_kind: IntervalKind | None = None

    @property
    def is_open(self) -> bool:
        return self.position.fret == 0


@dataclass(frozen=True)
class BoardLayout:
    """Everything a renderer needs to draw one fretboard."""

    title: str
    mode: str
    config: FretboardConfig
    tuning: Tuning
    strings: list[StringLine]
    frets: list[FretLine]
    markers: list[InlayMarker]
    cells: list[FretCell]

    @property
    def played_cells(self) -> list[FretCell]:
        return [cell for cell in self.cells if cell.played]

    @property
    def played_notes(self) -> list[str]:
        """Played note names in string then fret order, e.g. ``["E2", "B2"]``."""
        return [str(cell.note) for cell in self.played_cells]
