"""ABOUTME: Track parameters edited from the parameter panel (note, velocity, length...).
ABOUTME: Each parameter clamps its own range before writing to the sequencer."""

from typing import List

from music.note_names import chord_name, midi_to_note_name
from sequencer.track import PULSES_PER_STEP


class Parameter:
    """A named, index-addressable track control.

    Subclasses define how a value is read from a track and written back.
    """

    name = ""
    min_value = 0
    max_value = 127

    def __init__(self, seq):
        self.seq = seq

    def _track(self, track_index: int):
        tracks = self.seq.tracks()
        if 0 <= track_index < len(tracks):
            return tracks[track_index]
        return None

    def get(self, track) -> int:
        raise NotImplementedError

    def set(self, track_index: int, value: int):
        raise NotImplementedError

    def display(self, track) -> str:
        return str(self.get(track))

    def value(self, track_index: int) -> str:
        """Display form of the parameter for a track ("" for unknown tracks)."""
        track = self._track(track_index)
        if track is None:
            return ""
        return self.display(track)

    def update(self, track_index: int, delta: int):
        """Move the value by delta, clamped to [min_value, max_value]."""
        track = self._track(track_index)
        if track is None:
            return
        new_value = max(self.min_value, min(self.max_value, self.get(track) + delta))
        self.set(track_index, new_value)


class NoteParameter(Parameter):
    """Transposes the whole track chord; clamped so every note stays in 0-127."""

    name = "note"

    def get(self, track) -> int:
        return track.chord()[0]

    def update(self, track_index: int, delta: int):
        track = self._track(track_index)
        if track is None:
            return
        chord = track.chord()
        delta = max(self.min_value - min(chord), min(self.max_value - max(chord), delta))
        self.seq.set_track_chord(track_index, [n + delta for n in chord])

    def display(self, track) -> str:
        chord = track.chord()
        if len(chord) > 1:
            return chord_name(chord) or midi_to_note_name(chord[0])
        return midi_to_note_name(chord[0])


class VelocityParameter(Parameter):
    name = "velocity"

    def get(self, track) -> int:
        return track.velocity()

    def set(self, track_index: int, value: int):
        self.seq.set_track_velocity(track_index, value)


class LengthParameter(Parameter):
    """Note length in pulses, shown in steps."""

    name = "length"
    min_value = 1
    max_value = 16 * PULSES_PER_STEP

    def get(self, track) -> int:
        return track.length()

    def set(self, track_index: int, value: int):
        self.seq.set_track_length(track_index, value)

    def display(self, track) -> str:
        return f"{track.length() / PULSES_PER_STEP:.1f}"


class ProbabilityParameter(Parameter):
    name = "probability"
    max_value = 100

    def get(self, track) -> int:
        return track.probability()

    def set(self, track_index: int, value: int):
        self.seq.set_track_probability(track_index, value)

    def display(self, track) -> str:
        return f"{track.probability()}%"


class ChannelParameter(Parameter):
    """MIDI channel, stored 0-15 and shown 1-16."""

    name = "channel"
    max_value = 15

    def get(self, track) -> int:
        return track.channel()

    def set(self, track_index: int, value: int):
        self.seq.set_track_channel(track_index, value)

    def display(self, track) -> str:
        return str(track.channel() + 1)


def parameters(seq) -> List[Parameter]:
    """The parameter list shown in the panel, in key-row order."""
    return [
        NoteParameter(seq),
        VelocityParameter(seq),
        LengthParameter(seq),
        ProbabilityParameter(seq),
        ChannelParameter(seq),
    ]
