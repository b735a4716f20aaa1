"""Audio sinks: where clicked notes and chords are sent, and a MIDI-file implementation."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Final, Sequence, Union

from midiutil import MIDIFile

from fretmap.pitch_map import Note

# Durations used by the interactive board: single notes ring for an eighth,
# the played-notes chord for a quarter.
NOTE_DURATION: Final[str] = "8n"
CHORD_DURATION: Final[str] = "4n"

# In format 1 files midiutil keeps tempo events on its own conductor track,
# so the single user track holds only notes.
TRACK_GUITAR = 0
CHANNEL_GUITAR = 0
GM_ACOUSTIC_GUITAR_STEEL = 25  # General MIDI program numbers are 0-based

Duration = Union[str, float]
NoteLike = Union[Note, str]

_DURATION_RE = re.compile(r"^(\d+)([nt])(\.?)$")


def duration_to_beats(duration: Duration) -> float:
    """
    Convert a duration to quarter-note beats.

    Accepts Tone.js notation (``"4n"`` quarter, ``"8n"`` eighth, ``"8t"``
    eighth triplet, ``"4n."`` dotted quarter) or a positive number of beats.

    Raises:
        ValueError: If the duration is malformed or not positive.
    """
    if isinstance(duration, bool):
        raise ValueError(f"Invalid duration {duration!r}.")
    if isinstance(duration, (int, float)):
        if duration <= 0:
            raise ValueError(f"Duration must be positive, got {duration}.")
        return float(duration)

    match = _DURATION_RE.match(str(duration).strip())
    if not match or int(match.group(1)) == 0:
        raise ValueError(f"Invalid duration '{duration}'. Use e.g. '4n', '8n', '8t' or '4n.'.")

    beats = 4.0 / int(match.group(1))
    if match.group(2) == "t":
        beats *= 2.0 / 3.0
    if match.group(3):
        beats *= 1.5
    return beats


def _as_note(note: NoteLike) -> Note:
    return note if isinstance(note, Note) else Note.parse(note)


class AudioSink(ABC):
    """
    Fire-and-forget target for notes picked on the board.

    Concrete sinks decide what "playing" means (a synthesizer, a file, ...);
    callers never read anything back.
    """

    @abstractmethod
    def play_note(self, note: NoteLike, duration: Duration = NOTE_DURATION) -> None:
        """Sound a single note, e.g. ``play_note("E2", "8n")``."""

    @abstractmethod
    def play_chord(self, notes: Sequence[NoteLike], duration: Duration = CHORD_DURATION) -> None:
        """Sound several notes at once."""


@dataclass
class MidiEvent:
    """Notes starting together on the sink's timeline (times in beats)."""

    start: float
    duration: float
    pitches: list[int] = field(default_factory=list)


class MidiSink(AudioSink):
    """
    Records played notes and chords one after another and writes them as MIDI.

    Track layout (Format 1)
    -----------------------
    Conductor track — tempo only, added by midiutil

    Track 0 — "Guitar", steel-string acoustic patch
    """

    DEFAULT_TEMPO = 100    # BPM
    DEFAULT_VELOCITY = 90  # MIDI velocity (0-127)

    def __init__(self, tempo: int = DEFAULT_TEMPO, velocity: int = DEFAULT_VELOCITY) -> None:
        """
        Args:
            tempo:    Playback tempo in beats per minute.
            velocity: MIDI note-on velocity.
        """
        self.tempo = tempo
        self.velocity = velocity
        self.events: list[MidiEvent] = []
        self._cursor = 0.0

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _append(self, notes: Sequence[NoteLike], duration: Duration) -> None:
        beats = duration_to_beats(duration)
        pitches = [_as_note(note).midi for note in notes]
        self.events.append(MidiEvent(start=self._cursor, duration=beats, pitches=pitches))
        self._cursor += beats

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def length_beats(self) -> float:
        return self._cursor

    def play_note(self, note: NoteLike, duration: Duration = NOTE_DURATION) -> None:
        self._append([note], duration)

    def play_chord(self, notes: Sequence[NoteLike], duration: Duration = CHORD_DURATION) -> None:
        if not notes:
            raise ValueError("A chord needs at least one note.")
        self._append(notes, duration)

    def export(self, output_path: str) -> None:
        """
        Write every recorded event to a Standard MIDI File.

        Raises:
            OSError: If the output file cannot be opened for writing.
        """
        midi = MIDIFile(numTracks=1, removeDuplicates=False, deinterleave=False)

        midi.addTempo(TRACK_GUITAR, 0, self.tempo)
        midi.addTrackName(TRACK_GUITAR, 0, "Guitar")
        midi.addProgramChange(TRACK_GUITAR, CHANNEL_GUITAR, 0, GM_ACOUSTIC_GUITAR_STEEL)

        for event in self.events:
            for pitch in event.pitches:
                midi.addNote(
                    track=TRACK_GUITAR,
                    channel=CHANNEL_GUITAR,
                    pitch=pitch,
                    time=event.start,
                    duration=event.duration,
                    volume=self.velocity,
                )

        with open(output_path, "wb") as f:
            midi.writeFile(f)
