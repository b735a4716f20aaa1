"""Renderer implementations for fretboard output formats."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Final

import svgwrite

from fretmap.board_builder import MODE_INTERVALS
from fretmap.board_models import BoardLayout, FretCell
from fretmap.geometry import fret_line_positions
from fretmap.midi_exporter import CHORD_DURATION, NOTE_DURATION
from fretmap.pitch_map import STANDARD_STEPS, IntervalKind

TONE_MODULE_URL: Final[str] = "https://cdn.jsdelivr.net/npm/tone@14.7.77/+esm"

BOARD_FILL: Final[str] = "#d5a06e"
FRET_STROKE: Final[str] = "#888"
STRING_STROKE: Final[str] = "#aaa"
MARKER_FILL: Final[str] = "#ccc"
PLAYED_FILL: Final[str] = "#e74c3c"
NOTE_FILL: Final[str] = "#2980b9"
PLAYED_OPEN_FILL: Final[str] = "rgba(231, 76, 60, 0.3)"

INTERVAL_FILLS: Final[dict[IntervalKind, str]] = {
    IntervalKind.HALF_STEP: "#27ae60",
    IntervalKind.WHOLE_STEP: "#f39c12",
    IntervalKind.OTHER: "#7f8c8d",
}
INTERVAL_LABELS: Final[dict[IntervalKind, str]] = {
    IntervalKind.HALF_STEP: "half step",
    IntervalKind.WHOLE_STEP: "whole step",
    IntervalKind.OTHER: "other interval",
}


def _escape_html(text: str) -> str:
    """Escape the characters that are unsafe in HTML text and attribute values."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


class BoardRenderer(ABC):
    """Abstract fretboard renderer."""

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Default filename extension for this renderer."""

    @abstractmethod
    def render(self, layout: BoardLayout) -> str:
        """Render a board layout into a file content string."""


class SvgBoardRenderer(BoardRenderer):
    """Render a board layout as a standalone SVG document using svgwrite."""

    _NOTE_RADIUS: int = 10
    _MARKER_RADIUS: int = 8
    _OPEN_HIT_WIDTH: int = 40
    _OPEN_HIT_HEIGHT: int = 20
    _BUTTON_WIDTH: int = 100
    _BUTTON_HEIGHT: int = 30

    @property
    def default_extension(self) -> str:
        return ".svg"

    def render(self, layout: BoardLayout) -> str:
        cfg = layout.config
        # data-* and pointer attributes are outside svgwrite's SVG 1.1 tables
        dwg = svgwrite.Drawing(
            size=(cfg.svg_width, cfg.svg_height),
            viewBox=f"0 0 {cfg.svg_width:g} {cfg.svg_height:g}",
            class_="fretmap-board",
            debug=False,
        )

        self._draw_board(dwg, layout)
        self._draw_legend(dwg, layout)
        self._draw_cells(dwg, layout)
        self._draw_captions(dwg, layout)

        return dwg.tostring()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _draw_board(self, dwg: svgwrite.Drawing, layout: BoardLayout) -> None:
        cfg = layout.config
        dwg.add(dwg.rect((cfg.left, cfg.top), (cfg.width, cfg.height), fill=BOARD_FILL, stroke="black"))

        # skip the nut; the board outline already draws it
        for x in fret_line_positions(cfg)[1:]:
            dwg.add(dwg.line(
                (float(x), cfg.top),
                (float(x), cfg.bottom),
                stroke=FRET_STROKE,
                stroke_width=2,
            ))
        for fret_line in layout.frets:
            dwg.add(dwg.text(
                str(fret_line.fret),
                insert=(fret_line.label_x, cfg.bottom + 30),
                text_anchor="middle",
                class_="fret-number",
            ))

        for marker in layout.markers:
            for cx, cy in marker.points:
                dwg.add(dwg.circle(center=(cx, cy), r=self._MARKER_RADIUS, fill=MARKER_FILL))

        for string in layout.strings:
            dwg.add(dwg.line(
                (cfg.left, string.y),
                (cfg.right, string.y),
                stroke=STRING_STROKE,
                stroke_width=string.stroke_width,
            ))
            dwg.add(dwg.text(
                str(string.open_note),
                insert=(cfg.left - 20, string.y + 5),
                text_anchor="middle",
                font_weight="bold",
                class_="string-name",
            ))

    def _draw_legend(self, dwg: svgwrite.Drawing, layout: BoardLayout) -> None:
        cfg = layout.config
        if layout.tuning.steps == STANDARD_STEPS:
            lines = [
                "Perfect 4th between all strings (5 half steps)",
                "except Major 3rd between strings 3-2 (4 half steps)",
            ]
        else:
            steps = ", ".join(str(step) for step in layout.tuning.steps)
            lines = [
                "Open strings: " + " ".join(str(note) for note in layout.tuning.open_notes),
                f"Half steps between strings (low to high): {steps}",
            ]

        legend = dwg.g(class_="legend", transform=f"translate({cfg.left:g}, {cfg.top - 80:g})")
        legend.add(dwg.text("Guitar String Tuning:", insert=(0, 0), font_weight="bold"))
        for offset, line in enumerate(lines, start=1):
            legend.add(dwg.text(line, insert=(0, offset * 20)))
        dwg.add(legend)

    def _fill(self, layout: BoardLayout, cell: FretCell) -> str:
        if cell.played:
            return PLAYED_FILL
        if layout.mode == MODE_INTERVALS and cell.step_kind is not None:
            return INTERVAL_FILLS[cell.step_kind]
        return NOTE_FILL

    def _tooltip(self, cell: FretCell) -> str:
        prefix = "Open string" if cell.is_open else "Note"
        text = f"{prefix}: {cell.note}"
        if cell.step_kind is not None:
            text += f" ({INTERVAL_LABELS[cell.step_kind]})"
        if cell.played:
            text += " (Played in model)"
        return text

    def _draw_cells(self, dwg: svgwrite.Drawing, layout: BoardLayout) -> None:
        cfg = layout.config
        for cell in layout.cells:
            if cell.is_open:
                element = dwg.rect(
                    (cfg.left - self._OPEN_HIT_WIDTH, cell.y - self._OPEN_HIT_HEIGHT / 2),
                    (self._OPEN_HIT_WIDTH, self._OPEN_HIT_HEIGHT),
                    fill=PLAYED_OPEN_FILL if cell.played else "transparent",
                    cursor="pointer",
                    class_="open-string",
                    **{"data-note": str(cell.note)},
                )
            else:
                element = dwg.circle(
                    center=(cell.x, cell.y),
                    r=self._NOTE_RADIUS,
                    fill=self._fill(layout, cell),
                    stroke="black",
                    stroke_width=2 if cell.played else 1,
                    opacity=1 if cell.played else 0.7,
                    cursor="pointer",
                    class_="fret-note",
                    **{"data-note": str(cell.note)},
                )
            element.set_desc(title=self._tooltip(cell))
            dwg.add(element)

    def _draw_captions(self, dwg: svgwrite.Drawing, layout: BoardLayout) -> None:
        cfg = layout.config
        dwg.add(dwg.text(
            layout.title,
            insert=(cfg.svg_width / 2, 50),
            text_anchor="middle",
            font_size="24px",
            font_weight="bold",
            class_="board-title",
        ))
        dwg.add(dwg.text(
            "Click on any fret or open string to play the note",
            insert=(cfg.left, cfg.bottom + 60),
            font_style="italic",
        ))

        played = layout.played_notes
        if played:
            dwg.add(dwg.rect(
                (cfg.right - self._BUTTON_WIDTH, cfg.bottom + 50),
                (self._BUTTON_WIDTH, self._BUTTON_HEIGHT),
                rx=5,
                ry=5,
                fill=PLAYED_FILL,
                stroke="black",
                cursor="pointer",
                class_="play-chord",
                **{"data-notes": " ".join(played)},
            ))
            dwg.add(dwg.text(
                "Play Notes",
                insert=(cfg.right - self._BUTTON_WIDTH / 2, cfg.bottom + 70),
                text_anchor="middle",
                fill="white",
                font_weight="bold",
                pointer_events="none",
            ))
            dwg.add(dwg.text(
                "Highlighted notes from model: " + ", ".join(played),
                insert=(cfg.left, cfg.bottom + 80),
                fill=PLAYED_FILL,
                font_weight="bold",
                class_="played-summary",
            ))

        if layout.mode == MODE_INTERVALS:
            legend_y = cfg.bottom + 110
            for offset, kind in enumerate(IntervalKind):
                x = cfg.left + offset * 150
                dwg.add(dwg.circle(center=(x, legend_y), r=6, fill=INTERVAL_FILLS[kind]))
                dwg.add(dwg.text(INTERVAL_LABELS[kind], insert=(x + 12, legend_y + 5)))


class ToneHtmlRenderer(BoardRenderer):
    """
    Render a board into a self-contained HTML page with click-to-play audio.

    The SVG is inlined and a module script loads Tone.js, then attaches click
    handlers to every element carrying ``data-note`` and to the chord button.
    """

    def __init__(self, svg_renderer: SvgBoardRenderer | None = None) -> None:
        self.svg_renderer = svg_renderer or SvgBoardRenderer()

    @property
    def default_extension(self) -> str:
        return ".html"

    def render(self, layout: BoardLayout) -> str:
        svg = self.svg_renderer.render(layout)
        return self.build_html(layout, svg)

    def build_payload(self, layout: BoardLayout) -> str:
        """JSON consumed by the page script; safe to embed in a script tag."""
        payload = {
            "title": layout.title,
            "mode": layout.mode,
            "played_notes": layout.played_notes,
            "note_duration": NOTE_DURATION,
            "chord_duration": CHORD_DURATION,
        }
        return json.dumps(payload, separators=(",", ":")).replace("</", "<\\/")

    def build_html(self, layout: BoardLayout, svg: str) -> str:
        title_safe = _escape_html(layout.title)
        payload = self.build_payload(layout)

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{title_safe}</title>
  <style>
    body {{
      font-family: Helvetica, Arial, sans-serif;
      background: #f0f0f0;
      margin: 0;
      padding: 2rem;
    }}
    .board {{
      background: #fff;
      box-shadow: 0 2px 8px rgba(0, 0, 0, 0.15);
      margin: 0 auto;
      max-width: 860px;
      padding: 1rem;
    }}
    .board svg {{
      display: block;
      width: 100%;
      height: auto;
    }}
  </style>
</head>
<body>
  <div class="board">{svg}</div>
  <script id="fretmap-data" type="application/json">{payload}</script>
  <script type="module">
    import * as Tone from "{TONE_MODULE_URL}";

    const payloadNode = document.getElementById("fretmap-data");
    const payload = JSON.parse((payloadNode && payloadNode.textContent) || "{{}}");
    const noteDuration = payload.note_duration || "8n";
    const chordDuration = payload.chord_duration || "4n";
    const playedNotes = Array.isArray(payload.played_notes) ? payload.played_notes : [];

    const synth = new Tone.Synth().toDestination();
    const polySynth = new Tone.PolySynth(Tone.Synth).toDestination();

    document.querySelectorAll("[data-note]").forEach((node) => {{
      node.addEventListener("click", async () => {{
        await Tone.start();
        synth.triggerAttackRelease(node.dataset.note, noteDuration);
      }});
    }});

    const button = document.querySelector(".play-chord");
    if (button && playedNotes.length > 0) {{
      button.addEventListener("click", async () => {{
        await Tone.start();
        polySynth.triggerAttackRelease(playedNotes, chordDuration);
      }});
    }}
  </script>
</body>
</html>"""
