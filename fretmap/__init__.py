"""
fretmap
~~~~~~~

Guitar fretboard pitch map and diagram renderer.

Quick-start::

    import fretmap

    tuning = fretmap.build_standard_tuning()
    str(fretmap.note_at(tuning, 0, 0))      # 'E2'

    layout = fretmap.build_board(tuning)
    html = fretmap.ToneHtmlRenderer().render(layout)
"""

from __future__ import annotations

__version__: str = "0.1.0"

# ── Pitch map ────────────────────────────────────────────────────────
from fretmap.pitch_map import (
    FretPosition,
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
    tuning_from_steps,
)

# ── Geometry ─────────────────────────────────────────────────────────
from fretmap.geometry import FretboardConfig, fret_x, marker_frets, string_y

# ── Drawing ──────────────────────────────────────────────────────────
from fretmap.board_builder import build_board
from fretmap.board_renderers import SvgBoardRenderer, ToneHtmlRenderer

# ── Adapters ─────────────────────────────────────────────────────────
from fretmap.midi_exporter import AudioSink, MidiSink
from fretmap.model_adapter import ModelFormatError, ModelInstance, load_instance

__all__: list[str] = [
    # pitch map
    "FretPosition",
    "FretRangeError",
    "IntervalKind",
    "Note",
    "Tuning",
    "TuningError",
    "build_standard_tuning",
    "fret_table",
    "get_tuning",
    "interval_kind",
    "note_at",
    "tuning_from_steps",
    # geometry
    "FretboardConfig",
    "fret_x",
    "marker_frets",
    "string_y",
    # drawing
    "build_board",
    "SvgBoardRenderer",
    "ToneHtmlRenderer",
    # adapters
    "AudioSink",
    "MidiSink",
    "ModelFormatError",
    "ModelInstance",
    "load_instance",
]
