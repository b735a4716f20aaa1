"""BoardBuilder: turns a tuning and model data into a drawable BoardLayout."""

from __future__ import annotations

import logging
from typing import Final, Iterable

from fretmap.board_models import BoardLayout, FretCell, FretLine, InlayMarker, StringLine
from fretmap.geometry import (
    FretboardConfig,
    fret_x,
    marker_frets,
    marker_points,
    string_row,
    string_y,
)
from fretmap.pitch_map import (
    FretPosition,
    IntervalKind,
    Note,
    Tuning,
    interval_kind,
    note_at,
    semitone_step,
)

logger = logging.getLogger(__name__)

MODE_NOTES: Final[str] = "notes"
MODE_INTERVALS: Final[str] = "intervals"
SUPPORTED_MODES: Final[set[str]] = {MODE_NOTES, MODE_INTERVALS}

DEFAULT_TITLE: Final[str] = "Guitar Fretboard Visualization"

# Stroke width of the thinnest string and the extra width per string below it
_BASE_STRING_WIDTH: Final[float] = 2.0
_STRING_WIDTH_STEP: Final[float] = 0.4


def _string_stroke_width(string_index: int, config: FretboardConfig) -> float:
    """Lower strings are drawn thicker."""
    return _BASE_STRING_WIDTH + (config.string_count - string_index) * _STRING_WIDTH_STEP


def _interval_note(open_note: Note, fret: int, pitch_class: int) -> Note:
    """
    Note for a fret whose pitch class comes from the model.

    The octave is chosen so the note lies within a tritone of the pitch the
    tuning predicts, so a model that agrees with the tuning yields the
    same note as :func:`note_at`.
    """
    expected = open_note.midi + fret
    delta = semitone_step(expected % 12, pitch_class)
    if delta > 6:
        delta -= 12
    return Note.from_midi(expected + delta)


def build_board(
    tuning: Tuning,
    config: FretboardConfig | None = None,
    played: Iterable[FretPosition] = (),
    intervals: list[dict[int, int]] | None = None,
    title: str = DEFAULT_TITLE,
) -> BoardLayout:
    """
    Compute every drawable element of a fretboard.

    Args:
        tuning:    Open strings, lowest first.
        config:    Board layout; defaults to :class:`FretboardConfig`.
        played:    Positions to highlight as played.
        intervals: Per string (lowest first), the pitch class the model gives
                   each fret. When set the board is built in interval mode:
                   notes come from the model and each cell carries the kind
                   of step from the previous fret.
        title:     Heading shown above the board.

    Raises:
        FretRangeError: If a played position lies outside the board.
        ValueError:     If the tuning and config disagree on the string count.
    """
    config = config or FretboardConfig()
    if config.string_count != tuning.string_count:
        raise ValueError(
            f"Board has {config.string_count} strings but the tuning has {tuning.string_count}."
        )
    if intervals is not None and len(intervals) != tuning.string_count:
        raise ValueError(
            f"Expected intervals for {tuning.string_count} strings, got {len(intervals)}."
        )

    played_set = set()
    for position in played:
        # validates the position against the board
        note_at(tuning, position.string_index, position.fret, config.fret_count)
        played_set.add(position)

    strings: list[StringLine] = []
    cells: list[FretCell] = []
    for string_index, open_note in enumerate(tuning.open_notes):
        row = string_row(string_index, config)
        y = string_y(row, config)
        strings.append(
            StringLine(
                string_index=string_index,
                y=y,
                stroke_width=_string_stroke_width(string_index, config),
                open_note=open_note,
            )
        )

        row_intervals = intervals[string_index] if intervals is not None else None
        previous = open_note
        for fret in range(config.fret_count + 1):
            position = FretPosition(string_index=string_index, fret=fret)
            note = note_at(tuning, string_index, fret, config.fret_count)
            step_kind: IntervalKind | None = None
            if row_intervals is not None:
                if fret in row_intervals:
                    note = _interval_note(open_note, fret, row_intervals[fret])
                if fret > 0:
                    step_kind = interval_kind(semitone_step(previous.pitch_class, note.pitch_class))
            previous = note

            cells.append(
                FretCell(
                    position=position,
                    note=note,
                    x=fret_x(fret, config, centered=True),
                    y=y,
                    played=position in played_set,
                    step_kind=step_kind,
                )
            )

    frets = [
        FretLine(
            fret=fret,
            x=fret_x(fret, config),
            label_x=fret_x(fret, config, centered=True),
        )
        for fret in range(1, config.fret_count + 1)
    ]

    marker_set = marker_frets(config.fret_count)
    markers = [
        InlayMarker(fret=fret, points=marker_points(fret, config, marker_set.is_double(fret)))
        for fret in marker_set
    ]

    mode = MODE_INTERVALS if intervals is not None else MODE_NOTES
    logger.debug(
        "Built %s board: %d cells, %d played", mode, len(cells), len(played_set)
    )
    return BoardLayout(
        title=title,
        mode=mode,
        config=config,
        tuning=tuning,
        strings=strings,
        frets=frets,
        markers=markers,
        cells=cells,
    )
