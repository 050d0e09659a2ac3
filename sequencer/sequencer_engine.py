"""ABOUTME: Core sequencer engine for Pasos - owns tracks, steps, tempo and transport.
ABOUTME: Structural requests outside the engine limits are silent no-ops."""

import random
import threading
from typing import List, Optional

from .clock import Clock
from .track import Track


class NullOutput:
    """Output that drops every message (used when no MIDI device is open)."""

    def note_on(self, channel: int, note: int, velocity: int):
        pass

    def note_off(self, channel: int, note: int):
        pass

    def all_notes_off(self):
        pass


class Sequencer:
    """
    Handles the tracks and playback state of the sequencer.

    Features:
    - 1-10 tracks, 1-128 steps per track
    - Tempo in fractional BPM, clamped to 20.0-300.0
    - Playback driven by a Clock thread at 24 pulses per quarter note
    - Thread-safe: UI calls and clock pulses are serialized by one lock
    """

    MIN_TRACKS = 1
    MAX_TRACKS = 10
    MIN_STEPS = 1
    MAX_STEPS = 128
    MIN_TEMPO = 20.0
    MAX_TEMPO = 300.0

    def __init__(self, output=None, tempo: float = 120.0, num_tracks: int = 1,
                 num_steps: int = 16, rng: Optional[random.Random] = None,
                 clock: Optional[Clock] = None):
        """
        Initialize the sequencer.

        Args:
            output: MIDI output with note_on/note_off/all_notes_off (NullOutput if None)
            tempo: Starting tempo in BPM
            num_tracks: Starting track count (clamped to 1-10)
            num_steps: Steps per starting track (clamped to 1-128)
            rng: Random source for step probability
            clock: Clock to drive playback (a threaded Clock if None)
        """
        self.output = output if output is not None else NullOutput()
        self.rng = rng or random.Random()
        self._lock = threading.RLock()
        self._tempo = self._clamp_tempo(tempo)
        self._playing = False

        num_steps = max(self.MIN_STEPS, min(self.MAX_STEPS, num_steps))
        num_tracks = max(self.MIN_TRACKS, min(self.MAX_TRACKS, num_tracks))
        self._tracks: List[Track] = [Track(i, num_steps) for i in range(num_tracks)]

        self.clock = clock if clock is not None else Clock(self.tempo, self.pulse)

    # ── Transport ────────────────────────────────────────────────

    def is_playing(self) -> bool:
        return self._playing

    def toggle_play(self):
        """Start playback, or stop it and release every sounding note."""
        with self._lock:
            self._playing = not self._playing
            playing = self._playing
        if playing:
            self.clock.start()
        else:
            # Clock thread takes the lock on every pulse; stop it outside the lock
            self.clock.stop()
            self._release_all()

    def reset(self):
        """Rewind every track to its first step."""
        with self._lock:
            for track in self._tracks:
                track.rewind()
        self._release_all()

    def tempo(self) -> float:
        return self._tempo

    def set_tempo(self, tempo: float):
        self._tempo = self._clamp_tempo(tempo)

    def _clamp_tempo(self, tempo: float) -> float:
        return round(max(self.MIN_TEMPO, min(self.MAX_TEMPO, float(tempo))), 1)

    def pulse(self):
        """Advance every track by one clock pulse. Called from the clock thread."""
        with self._lock:
            if not self._playing:
                return
            for track in self._tracks:
                track.pulse(self.output, self.rng)

    def _release_all(self):
        with self._lock:
            for track in self._tracks:
                track.release_all(self.output)
            self.output.all_notes_off()

    # ── Tracks ───────────────────────────────────────────────────

    def tracks(self) -> List[Track]:
        with self._lock:
            return list(self._tracks)

    def add_track(self):
        with self._lock:
            if len(self._tracks) >= self.MAX_TRACKS:
                return
            num_steps = len(self._tracks[-1].steps()) if self._tracks else 16
            track = Track(len(self._tracks), num_steps)
            if self._tracks:
                track.sync_to(self._tracks[0])
            self._tracks.append(track)

    def remove_track(self):
        with self._lock:
            if len(self._tracks) <= self.MIN_TRACKS:
                return
            track = self._tracks.pop()
            track.release_all(self.output)

    def toggle_track(self, track_index: int):
        with self._lock:
            if 0 <= track_index < len(self._tracks):
                self._tracks[track_index].toggle()

    # ── Steps ────────────────────────────────────────────────────

    def add_step(self, track_index: int):
        with self._lock:
            if not 0 <= track_index < len(self._tracks):
                return
            track = self._tracks[track_index]
            if len(track.steps()) >= self.MAX_STEPS:
                return
            track.add_step()

    def remove_step(self, track_index: int):
        with self._lock:
            if not 0 <= track_index < len(self._tracks):
                return
            track = self._tracks[track_index]
            if len(track.steps()) <= self.MIN_STEPS:
                return
            track.remove_step()

    def toggle_step(self, track_index: int, step_index: int):
        with self._lock:
            if not 0 <= track_index < len(self._tracks):
                return
            steps = self._tracks[track_index].steps()
            if 0 <= step_index < len(steps):
                steps[step_index].toggle()

    # ── Track-wide values (used by the parameter panel) ──────────

    def set_track_chord(self, track_index: int, chord: List[int]):
        with self._lock:
            if 0 <= track_index < len(self._tracks):
                self._tracks[track_index].set_chord(chord)

    def set_track_velocity(self, track_index: int, velocity: int):
        with self._lock:
            if 0 <= track_index < len(self._tracks):
                self._tracks[track_index].set_velocity(velocity)

    def set_track_length(self, track_index: int, length: int):
        with self._lock:
            if 0 <= track_index < len(self._tracks):
                self._tracks[track_index].set_length(length)

    def set_track_probability(self, track_index: int, probability: int):
        with self._lock:
            if 0 <= track_index < len(self._tracks):
                self._tracks[track_index].set_probability(probability)

    def set_track_channel(self, track_index: int, channel: int):
        with self._lock:
            if 0 <= track_index < len(self._tracks):
                self._tracks[track_index].set_channel(channel)
