"""CLI tests driven through click's CliRunner."""

import json
from typing import Any

import pytest
from click.testing import CliRunner

from fretmap import __version__
from fretmap.cli import main


@pytest.fixture
def instance_path(tmp_path, standard_instance: dict[str, Any]):
    path = tmp_path / "instance.json"
    path.write_text(json.dumps(standard_instance), encoding="utf-8")
    return path


def test_version() -> None:
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_note_prints_name() -> None:
    runner = CliRunner()
    assert runner.invoke(main, ["note", "0", "0"]).output.strip() == "E2"
    assert runner.invoke(main, ["note", "5", "12"]).output.strip() == "E5"
    assert runner.invoke(main, ["note", "0", "0", "--tuning", "drop_d"]).output.strip() == "D2"


def test_note_out_of_range_fails() -> None:
    result = CliRunner().invoke(main, ["note", "0", "13"])
    assert result.exit_code == 1
    assert "ERROR" in result.output


def test_table_lists_every_string() -> None:
    result = CliRunner().invoke(main, ["table"])
    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    assert len(lines) == 7
    # highest string first
    assert lines[1].split()[1] == "E4"
    assert lines[-1].split()[-1] == "E3"


def test_render_html(tmp_path, instance_path) -> None:
    out = tmp_path / "board.html"
    result = CliRunner().invoke(main, ["render", str(instance_path), "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert "Played notes : E2, C4" in result.output
    content = out.read_text(encoding="utf-8")
    assert content.startswith("<!DOCTYPE html>")
    assert "Highlighted notes from model: E2, C4" in content


def test_render_svg_default_output_path(instance_path) -> None:
    result = CliRunner().invoke(main, ["render", str(instance_path), "--format", "svg"])
    assert result.exit_code == 0, result.output
    out = instance_path.with_suffix(".svg")
    assert out.read_text(encoding="utf-8").startswith("<svg ")


def test_render_intervals_mode(tmp_path, instance_path) -> None:
    out = tmp_path / "intervals.svg"
    result = CliRunner().invoke(
        main,
        ["render", str(instance_path), "--mode", "intervals", "--format", "svg", "-o", str(out)],
    )
    assert result.exit_code == 0, result.output
    assert "(half step)" in out.read_text(encoding="utf-8")


def test_render_bad_instance_fails(tmp_path) -> None:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"PlayedNote": []}), encoding="utf-8")
    result = CliRunner().invoke(main, ["render", str(path), "-o", str(tmp_path / "x.html")])
    assert result.exit_code == 1
    assert "Could not read model instance" in result.output


def test_midi_export(tmp_path, instance_path) -> None:
    out = tmp_path / "played.mid"
    result = CliRunner().invoke(main, ["midi", str(instance_path), "-o", str(out), "--arpeggio"])
    assert result.exit_code == 0, result.output
    assert "E2 C4" in result.output
    assert out.read_bytes().startswith(b"MThd")


def test_midi_without_played_notes_fails(tmp_path, standard_instance: dict[str, Any]) -> None:
    standard_instance["PlayedNote"] = []
    path = tmp_path / "silent.json"
    path.write_text(json.dumps(standard_instance), encoding="utf-8")
    result = CliRunner().invoke(main, ["midi", str(path)])
    assert result.exit_code == 1
    assert "no played notes" in result.output


def test_note_beyond_twelfth_fret_with_longer_neck() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["note", "0", "15", "--frets", "24"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "G3"
    assert runner.invoke(main, ["note", "0", "15"]).exit_code == 1


def test_midi_high_fret_needs_longer_neck(tmp_path, standard_instance: dict[str, Any]) -> None:
    standard_instance["PlayedNote"].append(
        {"_id": "PlayedNote2", "string": {"_id": "String6"}, "fret": {"_id": 15}}
    )
    path = tmp_path / "high.json"
    path.write_text(json.dumps(standard_instance), encoding="utf-8")
    out = tmp_path / "high.mid"

    result = CliRunner().invoke(main, ["midi", str(path), "-o", str(out)])
    assert result.exit_code == 1
    assert "Fret must be in 0..12" in result.output

    result = CliRunner().invoke(main, ["midi", str(path), "-o", str(out), "--frets", "24"])
    assert result.exit_code == 0, result.output
    assert "G3" in result.output
    assert out.read_bytes().startswith(b"MThd")


def test_render_null_strings_fails_cleanly(tmp_path) -> None:
    path = tmp_path / "null.json"
    path.write_text(json.dumps({"String": None}), encoding="utf-8")
    result = CliRunner().invoke(main, ["render", str(path), "-o", str(tmp_path / "x.svg")])
    assert result.exit_code == 1
    assert "ERROR" in result.output
    assert "must be a list" in result.output


def test_render_intervals_with_list_frets_fails_cleanly(
    tmp_path, standard_instance: dict[str, Any]
) -> None:
    standard_instance["String"][0]["frets"] = [{"pos": {"_id": 1}}]
    path = tmp_path / "list_frets.json"
    path.write_text(json.dumps(standard_instance), encoding="utf-8")
    result = CliRunner().invoke(
        main, ["render", str(path), "--mode", "intervals", "-o", str(tmp_path / "x.html")]
    )
    assert result.exit_code == 1
    assert "ERROR" in result.output
    assert "not a mapping" in result.output


def test_render_unreadable_instance_reports_read_error(
    tmp_path, instance_path, monkeypatch
) -> None:
    def _unreadable(path, high_first=True):
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr("fretmap.cli.load_instance", _unreadable)
    result = CliRunner().invoke(main, ["render", str(instance_path), "-o", str(tmp_path / "x.svg")])
    assert result.exit_code == 1
    assert "Could not read model instance" in result.output
    assert "Could not write output file" not in result.output
