"""Shared model-instance fixtures."""

from typing import Any

import pytest

# Open pitch classes by stringPos, highest string first: E B G D A E
_OPEN_BY_POS = {1: 4, 2: 11, 3: 7, 4: 2, 5: 9, 6: 4}


def make_string_atom(string_pos: int, open_pc: int, frets: int = 12) -> dict[str, Any]:
    """A String atom whose fret intervals follow the open pitch chromatically."""
    return {
        "_id": f"String{string_pos}",
        "stringPos": {"_id": string_pos},
        "stringStart": {"_id": f"Interval{open_pc}", "pos": {"_id": open_pc + 1}},
        "frets": {
            str(fret): {"pos": {"_id": (open_pc + fret) % 12 + 1}} for fret in range(1, frets + 1)
        },
    }


@pytest.fixture
def standard_instance() -> dict[str, Any]:
    """Standard tuning with low E open (E2) and B string fret 1 (C4) played."""
    # listed out of order on purpose; stringPos decides the order
    strings = [make_string_atom(pos, _OPEN_BY_POS[pos]) for pos in (3, 1, 6, 2, 5, 4)]
    return {
        "String": strings,
        "PlayedNote": [
            {"_id": "PlayedNote0", "string": {"_id": "String2"}, "fret": {"_id": "1"}},
            {"_id": "PlayedNote1", "string": {"_id": "String6"}, "fret": {"_id": 0}},
        ],
    }
