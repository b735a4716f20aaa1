"""fretmap CLI entry point."""

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from fretmap import __version__
from fretmap.board_builder import (
    DEFAULT_TITLE,
    MODE_INTERVALS,
    MODE_NOTES,
    SUPPORTED_MODES,
    build_board,
)
from fretmap.board_renderers import BoardRenderer, SvgBoardRenderer, ToneHtmlRenderer
from fretmap.geometry import FretboardConfig
from fretmap.midi_exporter import CHORD_DURATION, NOTE_DURATION, MidiSink
from fretmap.model_adapter import load_instance
from fretmap.pitch_map import FRET_COUNT, TUNING_PRESETS, fret_table, get_tuning, note_at

MAX_FRETS = 24


def _get_renderer(output_format: str) -> BoardRenderer:
    """Return the renderer for the requested output format."""
    if output_format == "svg":
        return SvgBoardRenderer()
    return ToneHtmlRenderer()


def _fail(message: str) -> NoReturn:
    click.echo(f"  ERROR: {message}", err=True)
    sys.exit(1)


tuning_option = click.option(
    "--tuning",
    type=click.Choice(sorted(TUNING_PRESETS), case_sensitive=False),
    default="standard",
    show_default=True,
    help="Open-string tuning preset.",
)


def frets_option(help_text: str):
    return click.option(
        "--frets",
        type=click.IntRange(1, MAX_FRETS),
        default=FRET_COUNT,
        show_default=True,
        help=help_text,
    )


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="fretmap")
@click.option("--verbose", "-v", is_flag=True, help="Log diagnostic messages to stderr.")
def main(verbose: bool) -> None:
    """fretmap — guitar fretboard pitch map and interactive diagram renderer."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ── note subcommand ────────────────────────────────────────────────────────────

@main.command()
@click.argument("string_index", type=int)
@click.argument("fret", type=int)
@tuning_option
@frets_option("Number of frets on the neck.")
def note(string_index: int, fret: int, tuning: str, frets: int) -> None:
    """
    Print the note at STRING_INDEX (0 = lowest string) and FRET (0 = open).

    \b
    Examples:
      fretmap note 0 0          # E2
      fretmap note 5 12         # E5
      fretmap note 0 15 --frets 24
    """
    try:
        click.echo(str(note_at(get_tuning(tuning), string_index, fret, fret_count=frets)))
    except ValueError as exc:
        _fail(str(exc))


# ── table subcommand ───────────────────────────────────────────────────────────

@main.command()
@tuning_option
@frets_option("Number of frets to list.")
def table(tuning: str, frets: int) -> None:
    """Print every note on the board, highest string first (tab orientation)."""
    rows = fret_table(get_tuning(tuning), frets)
    click.echo("    " + "".join(f"{fret:>5}" for fret in range(frets + 1)))
    for string_index in reversed(range(len(rows))):
        cells = "".join(f"{str(n):>5}" for n in rows[string_index])
        click.echo(f"{string_index:>3} {cells}")


# ── render subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("instance", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination file path. Defaults to the instance path with the format's extension.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["html", "svg"], case_sensitive=False),
    default="html",
    show_default=True,
    help="Interactive HTML page (Tone.js click-to-play) or a static SVG.",
)
@click.option(
    "--mode",
    type=click.Choice(sorted(SUPPORTED_MODES), case_sensitive=False),
    default=MODE_NOTES,
    show_default=True,
    help="Overlay played notes, or colour each fret by its step from the previous one.",
)
@click.option("--title", default=DEFAULT_TITLE, show_default=True, metavar="TEXT")
@frets_option("Number of frets to draw.")
def render(
    instance: str,
    output: str | None,
    output_format: str,
    mode: str,
    title: str,
    frets: int,
) -> None:
    """
    Render a model instance (JSON) as a fretboard diagram.

    \b
    Examples:
      fretmap render instance.json
      fretmap render instance.json --mode intervals -o board.html
      fretmap render instance.json --format svg -o board.svg
    """
    normalized_format = output_format.lower()
    normalized_mode = mode.lower()
    renderer = _get_renderer(normalized_format)
    resolved_output = output or str(Path(instance).with_suffix(renderer.default_extension))

    click.echo(f"fretmap v{__version__}")
    click.echo(f"  Instance : {instance}")
    click.echo(f"  Mode     : {normalized_mode}  |  Format: {normalized_format}")
    click.echo(f"  Output   : {resolved_output}")
    click.echo()

    click.echo("[1/3] Reading model instance...")
    try:
        model = load_instance(instance)
    except (OSError, ValueError) as exc:
        _fail(f"Could not read model instance — {exc}")

    try:
        tuning = model.tuning()
        played = model.played_positions()
        intervals = model.interval_rows() if normalized_mode == MODE_INTERVALS else None
        click.echo("      Open strings : " + " ".join(str(n) for n in tuning.open_notes))

        click.echo("[2/3] Laying out fretboard...")
        layout = build_board(
            tuning,
            FretboardConfig(fret_count=frets),
            played=played,
            intervals=intervals,
            title=title,
        )
        if layout.played_notes:
            click.echo(f"      Played notes : {', '.join(layout.played_notes)}")

        click.echo(f"[3/3] Writing {normalized_format.upper()} file...")
        content = renderer.render(layout)
        with open(resolved_output, "w", encoding="utf-8") as fh:
            fh.write(content)
    except OSError as exc:
        _fail(f"Could not write output file — {exc}")
    except ValueError as exc:
        _fail(f"Could not render fretboard — {exc}")

    click.echo()
    click.echo(f"Done!  Open '{resolved_output}' in any browser.")


# ── midi subcommand ────────────────────────────────────────────────────────────

@main.command()
@click.argument("instance", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination MIDI file path. Defaults to the instance path with .mid.",
)
@click.option(
    "--tempo",
    type=click.IntRange(20, 300),
    default=MidiSink.DEFAULT_TEMPO,
    show_default=True,
    help="Playback tempo in BPM.",
)
@click.option(
    "--arpeggio",
    is_flag=True,
    help="Play each note on its own before the chord.",
)
@frets_option("Number of frets on the neck.")
def midi(instance: str, output: str | None, tempo: int, arpeggio: bool, frets: int) -> None:
    """Export the model's played notes as a MIDI chord."""
    resolved_output = output or str(Path(instance).with_suffix(".mid"))

    try:
        model = load_instance(instance)
        tuning = model.tuning()
        notes = [
            note_at(tuning, pos.string_index, pos.fret, fret_count=frets)
            for pos in model.played_positions()
        ]
    except (OSError, ValueError) as exc:
        _fail(f"Could not read model instance — {exc}")

    if not notes:
        click.echo("  WARNING: The instance has no played notes.", err=True)
        sys.exit(1)

    sink = MidiSink(tempo=tempo)
    if arpeggio:
        for played_note in notes:
            sink.play_note(played_note, NOTE_DURATION)
    sink.play_chord(notes, CHORD_DURATION)

    try:
        sink.export(resolved_output)
    except OSError as exc:
        _fail(f"Could not write MIDI file — {exc}")

    click.echo(f"Wrote {len(notes)} note(s) ({' '.join(str(n) for n in notes)}) → '{resolved_output}'")
