"""ABOUTME: Track and Step models for the sequencer engine.
ABOUTME: A track is an ordered list of steps plus mute state and MIDI channel."""

import random
from typing import List, Optional, Tuple

PULSES_PER_STEP = 6

DEFAULT_NOTE = 60
DEFAULT_VELOCITY = 100
DEFAULT_LENGTH = PULSES_PER_STEP
DEFAULT_PROBABILITY = 100


class Step:
    """One slot of a track. Read by the UI, mutated through the Sequencer."""

    def __init__(self, track: 'Track', position: int):
        self._track = track
        self._position = position
        self._active = False
        self._velocity = track.velocity()
        self._probability = track.probability()
        self._length = track.length()
        self._chord = list(track.chord())

    def track(self) -> 'Track':
        return self._track

    def position(self) -> int:
        return self._position

    def is_active(self) -> bool:
        return self._active

    def is_current_step(self) -> bool:
        """True when the track's transport cursor sits on this step."""
        return self._track.current_position() == self._position

    def velocity(self) -> int:
        return self._velocity

    def probability(self) -> int:
        return self._probability

    def length(self) -> int:
        """Note length in pulses (6 pulses per step)."""
        return self._length

    def chord(self) -> List[int]:
        return list(self._chord)

    def toggle(self):
        self._active = not self._active


class Track:
    """
    Ordered sequence of steps with its own transport cursor.

    Track-wide values (chord, velocity, length, probability) are the defaults
    for new steps, and setting one rewrites every existing step as well.
    """

    def __init__(self, index: int, num_steps: int = 16):
        self._active = True
        self._channel = index % 16
        self._chord = [DEFAULT_NOTE]
        self._velocity = DEFAULT_VELOCITY
        self._length = DEFAULT_LENGTH
        self._probability = DEFAULT_PROBABILITY

        self._position = 0
        self._pulse = 0
        # Pending note-offs: [pulses_left, channel, note]
        self._pending_offs: List[List[int]] = []

        self._steps: List[Step] = []
        for _ in range(num_steps):
            self.add_step()

    # ── Read accessors ───────────────────────────────────────────

    def steps(self) -> List[Step]:
        return list(self._steps)

    def is_active(self) -> bool:
        return self._active

    def channel(self) -> int:
        return self._channel

    def chord(self) -> List[int]:
        return list(self._chord)

    def velocity(self) -> int:
        return self._velocity

    def length(self) -> int:
        return self._length

    def probability(self) -> int:
        return self._probability

    def current_position(self) -> int:
        return self._position

    # ── Mutators (called by the Sequencer under its lock) ────────

    def toggle(self):
        self._active = not self._active

    def add_step(self):
        self._steps.append(Step(self, len(self._steps)))

    def remove_step(self):
        self._steps.pop()
        if self._position >= len(self._steps):
            self._position = 0
            self._pulse = 0

    def set_channel(self, channel: int):
        self._channel = channel

    def set_chord(self, chord: List[int]):
        self._chord = list(chord)
        for step in self._steps:
            step._chord = list(chord)

    def set_velocity(self, velocity: int):
        self._velocity = velocity
        for step in self._steps:
            step._velocity = velocity

    def set_length(self, length: int):
        self._length = length
        for step in self._steps:
            step._length = length

    def set_probability(self, probability: int):
        self._probability = probability
        for step in self._steps:
            step._probability = probability

    def sync_to(self, other: 'Track'):
        """Align the transport cursor with another track, for tracks added mid-playback."""
        self._position = other.current_position() % len(self._steps) if self._steps else 0
        self._pulse = other._pulse

    def rewind(self):
        self._position = 0
        self._pulse = 0

    # ── Playback ─────────────────────────────────────────────────

    def pulse(self, output, rng: Optional[random.Random] = None):
        """
        Advance this track by one clock pulse.

        Fires the current step on its first pulse, sends due note-offs, and
        moves the cursor to the next step every PULSES_PER_STEP pulses.

        Args:
            output: Object with note_on(channel, note, velocity) and note_off(channel, note)
            rng: Random source for step probability (module random if None)
        """
        self._release_due_notes(output)

        if self._pulse == 0 and self._steps:
            self._trigger(self._steps[self._position], output, rng or random)

        self._pulse += 1
        if self._pulse >= PULSES_PER_STEP:
            self._pulse = 0
            if self._steps:
                self._position = (self._position + 1) % len(self._steps)

    def _trigger(self, step: Step, output, rng):
        if not self._active or not step.is_active():
            return
        if rng.randint(1, 100) > step.probability():
            return
        for note in step.chord():
            output.note_on(self._channel, note, step.velocity())
            self._pending_offs.append([step.length(), self._channel, note])

    def _release_due_notes(self, output):
        still_pending = []
        for pending in self._pending_offs:
            pending[0] -= 1
            if pending[0] <= 0:
                output.note_off(pending[1], pending[2])
            else:
                still_pending.append(pending)
        self._pending_offs = still_pending

    def release_all(self, output) -> List[Tuple[int, int]]:
        """Send every pending note-off now. Returns the (channel, note) pairs released."""
        released = []
        for _, channel, note in self._pending_offs:
            output.note_off(channel, note)
            released.append((channel, note))
        self._pending_offs = []
        return released
