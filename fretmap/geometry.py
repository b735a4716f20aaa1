"""FretboardGeometry: maps (string, fret) coordinates to SVG drawing coordinates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterator

import numpy as np

#: Marker frets within one octave of the neck; 0 stands for the 12th/24th fret.
_MARKER_PATTERN: Final[frozenset[int]] = frozenset({3, 5, 7, 9, 0})
DOUBLE_MARKER_OFFSET: Final[float] = 30.0


@dataclass(frozen=True)
class FretboardConfig:
    """
    Board layout in SVG user units.

    The defaults reproduce an 800x500 canvas with a 600x200 board whose
    top-left corner sits at (100, 100).

    Attributes:
        high_string_on_top: Draw the highest string on the top row (tab
                            orientation). When False, string index 0 is on top.
    """

    svg_width: float = 800
    svg_height: float = 500
    left: float = 100
    top: float = 100
    width: float = 600
    height: float = 200
    string_count: int = 6
    fret_count: int = 12
    high_string_on_top: bool = True

    def __post_init__(self) -> None:
        if self.fret_count < 1:
            raise ValueError(f"fret_count must be at least 1, got {self.fret_count}.")
        if self.string_count < 2:
            raise ValueError(f"string_count must be at least 2, got {self.string_count}.")
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Board width and height must be positive.")

    @property
    def fret_spacing(self) -> float:
        return self.width / self.fret_count

    @property
    def string_spacing(self) -> float:
        return self.height / (self.string_count - 1)

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass(frozen=True)
class MarkerSet:
    """Inlay marker frets; ``doubles`` holds the frets drawn with two dots."""

    frets: frozenset[int]
    doubles: frozenset[int]

    def __contains__(self, fret: object) -> bool:
        return fret in self.frets

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self.frets))

    def __len__(self) -> int:
        return len(self.frets)

    def is_double(self, fret: int) -> bool:
        return fret in self.doubles


def fret_x(fret: int, config: FretboardConfig, centered: bool = False) -> float:
    """
    X coordinate of a fret.

    With ``centered=False`` this is the fret line itself. With ``centered=True``
    it is the midpoint of the cell behind the fret, where note markers and fret
    numbers are drawn; for fret 0 that is half a cell left of the nut.
    """
    position = fret - 0.5 if centered else fret
    return config.left + position * config.fret_spacing


def string_y(string_index: int, config: FretboardConfig) -> float:
    """Y coordinate of drawing row ``string_index`` (row 0 is the top edge)."""
    return config.top + string_index * config.string_spacing


def string_row(string_index: int, config: FretboardConfig) -> int:
    """Drawing row of a string indexed lowest-first."""
    if config.high_string_on_top:
        return config.string_count - 1 - string_index
    return string_index


def fret_line_positions(config: FretboardConfig) -> np.ndarray:
    """X positions of the nut and every fret line, shape (fret_count + 1,)."""
    return np.linspace(config.left, config.right, config.fret_count + 1)


def marker_frets(fret_count: int) -> MarkerSet:
    """Conventional inlay positions (3, 5, 7, 9, 12, 15, ...) up to ``fret_count``."""
    frets = frozenset(
        fret for fret in range(1, fret_count + 1) if fret % 12 in _MARKER_PATTERN
    )
    doubles = frozenset(fret for fret in frets if fret % 12 == 0)
    return MarkerSet(frets=frets, doubles=doubles)


def marker_points(fret: int, config: FretboardConfig, double: bool = False) -> list[tuple[float, float]]:
    """Centre points of the inlay dot(s) for ``fret``."""
    x = fret_x(fret, config, centered=True)
    y = config.top + config.height / 2
    if double:
        return [(x, y - DOUBLE_MARKER_OFFSET), (x, y + DOUBLE_MARKER_OFFSET)]
    return [(x, y)]
