"""Adapter from model-finder instances to plain string/fret integers.

A model instance is exported as JSON keyed by signature name, each value a
list of atoms. Only the relations the fretboard needs are read::

    {
      "String": [
        {"_id": "String0",
         "stringPos": {"_id": 1},
         "stringStart": {"pos": {"_id": 5}},
         "frets": {"1": {"pos": {"_id": 6}}, "2": {"pos": {"_id": 7}}}}
      ],
      "PlayedNote": [
        {"_id": "PlayedNote0", "string": {"_id": "String0"}, "fret": {"_id": 3}}
      ]
    }

Interval positions (``pos._id``) are 1-based pitch classes (1 = C).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from fretmap.pitch_map import (
    FretPosition,
    Tuning,
    semitone_step,
    tuning_from_steps,
)

logger = logging.getLogger(__name__)

STRING_SIG = "String"
PLAYED_NOTE_SIG = "PlayedNote"


class ModelFormatError(ValueError):
    """Raised when a model instance lacks the atoms or fields the board needs."""


def atom_id(ref: Any) -> Any:
    """Return the ``_id`` of an atom reference, or the value itself if it is bare."""
    if isinstance(ref, dict):
        if "_id" not in ref:
            raise ModelFormatError(f"Atom reference has no '_id': {ref!r}")
        return ref["_id"]
    return ref


def atom_int(ref: Any) -> int:
    """``_id`` of an integer-valued atom (Int atoms may arrive as strings)."""
    value = atom_id(ref)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ModelFormatError(f"Expected an integer atom, got {value!r}") from exc


def _field(atom: Any, name: str) -> Any:
    if not isinstance(atom, dict):
        raise ModelFormatError(f"Expected an atom object, got {atom!r}.")
    if name not in atom:
        raise ModelFormatError(f"Atom {atom.get('_id', '?')!r} has no '{name}' field.")
    return atom[name]


def interval_pitch_class(interval: Any) -> int:
    """Pitch class (0-11) of an Interval atom from its 1-based ``pos``."""
    return (atom_int(_field(interval, "pos")) - 1) % 12


@dataclass
class ModelInstance:
    """
    String and PlayedNote atoms of one model instance.

    Attributes:
        strings:      String atoms as exported.
        played_notes: PlayedNote atoms; empty when the model has none.
        high_first:   True when ``stringPos`` 1 is the highest string, which
                      is how the fretboard model numbers its strings.
    """

    strings: list[dict[str, Any]]
    played_notes: list[dict[str, Any]] = field(default_factory=list)
    high_first: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any], high_first: bool = True) -> "ModelInstance":
        if not isinstance(data, dict) or STRING_SIG not in data:
            raise ModelFormatError(f"Instance has no '{STRING_SIG}' atoms.")
        strings = data[STRING_SIG]
        played = data.get(PLAYED_NOTE_SIG) or []
        if not isinstance(strings, list):
            raise ModelFormatError(f"'{STRING_SIG}' must be a list of atoms, got {strings!r}.")
        if not isinstance(played, list):
            raise ModelFormatError(f"'{PLAYED_NOTE_SIG}' must be a list of atoms, got {played!r}.")
        logger.debug("Loaded %d string atom(s), %d played note(s)", len(strings), len(played))
        return cls(strings=strings, played_notes=played, high_first=high_first)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _lowest_first(self) -> list[dict[str, Any]]:
        ordered = self.ordered_strings()
        return list(reversed(ordered)) if self.high_first else ordered

    def _string_index_by_id(self) -> dict[Any, int]:
        return {atom_id(atom): index for index, atom in enumerate(self._lowest_first())}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def ordered_strings(self) -> list[dict[str, Any]]:
        """String atoms sorted by ``stringPos``."""
        return sorted(self.strings, key=lambda atom: atom_int(_field(atom, "stringPos")))

    def tuning(self) -> Tuning:
        """
        Tuning of the modelled strings, lowest string first.

        The model only carries pitch classes, so open strings are assumed to
        ascend from octave 2.
        """
        offsets = [
            interval_pitch_class(_field(atom, "stringStart")) for atom in self._lowest_first()
        ]
        if not offsets:
            raise ModelFormatError("Instance has no strings.")
        steps = [semitone_step(low, high) for low, high in zip(offsets, offsets[1:])]
        return tuning_from_steps(offsets[0], steps, lowest_octave=2)

    def played_positions(self) -> list[FretPosition]:
        """Positions of all PlayedNote atoms, ordered by string then fret."""
        index_by_id = self._string_index_by_id()
        positions: set[FretPosition] = set()
        for note in self.played_notes:
            string_ref = atom_id(_field(note, "string"))
            if string_ref not in index_by_id:
                raise ModelFormatError(f"PlayedNote refers to unknown string {string_ref!r}.")
            positions.add(
                FretPosition(
                    string_index=index_by_id[string_ref],
                    fret=atom_int(_field(note, "fret")),
                )
            )
        return sorted(positions, key=lambda pos: (pos.string_index, pos.fret))

    def interval_rows(self) -> list[dict[int, int]]:
        """Per string (lowest first), the pitch class each fret's Interval atom carries."""
        rows: list[dict[int, int]] = []
        for atom in self._lowest_first():
            frets = atom.get("frets") or {}
            if not isinstance(frets, dict):
                raise ModelFormatError(
                    f"String {atom.get('_id', '?')!r} has 'frets' that is not a mapping."
                )
            row = {
                atom_int(fret): interval_pitch_class(interval) for fret, interval in frets.items()
            }
            if not row:
                logger.debug("String %r has no fret intervals", atom.get("_id"))
            rows.append(row)
        return rows


def load_instance(path: str | Path, high_first: bool = True) -> ModelInstance:
    """
    Read a model instance from a JSON file.

    Raises:
        ModelFormatError: If the file is not valid JSON or lacks String atoms.
        OSError: If the file cannot be read.
    """
    with open(path, encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise ModelFormatError(f"'{path}' is not valid JSON: {exc}") from exc
    return ModelInstance.from_dict(data, high_first=high_first)
