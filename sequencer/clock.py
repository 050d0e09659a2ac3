"""ABOUTME: Pulse clock for the sequencer engine, running on its own thread.
ABOUTME: Emits 24 pulses per quarter note at the tempo returned by a callback."""

import threading
import time
from typing import Callable, Optional

PULSES_PER_QUARTER_NOTE = 24


def pulse_interval(tempo: float) -> float:
    """
    Duration of one clock pulse in seconds.

    Quarter note = 60 / BPM seconds, split into 24 pulses.
    """
    return 60.0 / (tempo * PULSES_PER_QUARTER_NOTE)


class Clock:
    """Calls on_pulse at a steady rate until stopped."""

    def __init__(self, tempo_callback: Callable[[], float], on_pulse: Callable[[], None]):
        self.tempo_callback = tempo_callback
        self.on_pulse = on_pulse
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self.is_running():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="sequencer-clock", daemon=True)
        self._thread.start()

    def stop(self):
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=1.0)
        self._thread = None

    def _run(self):
        next_pulse = time.perf_counter()
        while not self._stop_event.is_set():
            self.on_pulse()
            # Schedule against the ideal grid so sleep jitter does not accumulate
            next_pulse += pulse_interval(self.tempo_callback())
            delay = next_pulse - time.perf_counter()
            if delay < 0:
                next_pulse = time.perf_counter()
                delay = 0
            self._stop_event.wait(delay)
