"""ABOUTME: Input dispatcher - routes key, resize and tick events of the sequencer view.
ABOUTME: Mutates the ViewState or calls the sequencer; bad indices degrade to no-ops."""

from typing import Callable, List, Optional

from .keymap import KeyMap
from .view_state import STEPS_PER_PAGE, Mode, ViewState, page_count

TEMPO_STEP = 1.0
TEMPO_FINE_STEP = 0.1


class InputDispatcher:
    """
    Event-driven state machine of the sequencer view.

    State axes: Mode (TRACK, RECORD) and help collapsed/expanded. Each event
    is handled to completion before the next one. Structural requests go to
    the sequencer unchecked past what this class needs to keep its own
    cursors valid; the sequencer rejects anything beyond its limits.
    """

    def __init__(self, seq, parameters: List, keymap: KeyMap, state: ViewState,
                 on_quit: Optional[Callable[[], None]] = None,
                 on_render: Optional[Callable[[], None]] = None):
        """
        Args:
            seq: Sequencer exposing the engine contract
            parameters: Ordered parameter list (see ui.parameters)
            keymap: Key binding table
            state: View state to mutate
            on_quit: Called once the sequencer has been halted and reset
            on_render: Called on every tick to redraw the frame
        """
        self.seq = seq
        self.parameters = parameters
        self.keymap = keymap
        self.state = state
        self.on_quit = on_quit
        self.on_render = on_render

    # ── Helpers ──────────────────────────────────────────────────

    def track_count(self) -> int:
        return len(self.seq.tracks())

    def step_count(self, track_index: int) -> int:
        tracks = self.seq.tracks()
        if 0 <= track_index < len(tracks):
            return len(tracks[track_index].steps())
        return 0

    def track_pages_nb(self) -> int:
        return page_count(self.step_count(self.state.active_track))

    def _select_track(self, track_index: int):
        if track_index >= self.track_count():
            return
        if track_index != self.state.active_track:
            # The edit cursor belongs to the track it was set on
            self.state.active_step = None
        self.state.active_track = track_index
        # A shorter track may not have the page we were on
        self.state.active_track_page = min(self.state.active_track_page, self.track_pages_nb() - 1)

    # ── Events ───────────────────────────────────────────────────

    def handle_resize(self, width: int, height: int):
        self.state.width = width
        self.state.height = height

    def handle_tick(self):
        """Request one re-render. ViewState indices are untouched."""
        if self.on_render is not None:
            self.on_render()

    def handle_key(self, key: str) -> bool:
        """Handle one key chord. Returns False when no binding matches it."""
        km = self.keymap

        if km.toggle_play.matches(key):
            self.seq.toggle_play()

        elif km.mode.matches(key):
            self.state.mode = Mode.RECORD if self.state.mode == Mode.TRACK else Mode.TRACK

        elif km.add.matches(key):
            self.add_press()

        elif km.remove.matches(key):
            self.remove_press()

        elif km.step_select.matches(key):
            self.step_press(km.step_select.index(key))

        elif km.step_toggle.matches(key):
            self.step_toggle_press(km.step_toggle.index(key))

        elif km.track_select.matches(key):
            self._select_track(km.track_select.index(key))

        elif km.track_toggle.matches(key):
            self.seq.toggle_track(km.track_toggle.index(key))

        elif km.track_page_up.matches(key):
            self.state.active_track_page = (self.state.active_track_page + 1) % self.track_pages_nb()

        elif km.track_page_down.matches(key):
            if self.state.active_track_page - 1 < 0:
                self.state.active_track_page = self.track_pages_nb() - 1
            else:
                self.state.active_track_page -= 1

        elif km.tempo_up.matches(key):
            self.seq.set_tempo(self.seq.tempo() + TEMPO_STEP)

        elif km.tempo_down.matches(key):
            self.seq.set_tempo(self.seq.tempo() - TEMPO_STEP)

        elif km.tempo_fine_up.matches(key):
            self.seq.set_tempo(self.seq.tempo() + TEMPO_FINE_STEP)

        elif km.tempo_fine_down.matches(key):
            self.seq.set_tempo(self.seq.tempo() - TEMPO_FINE_STEP)

        elif km.param_select.matches(key):
            number = km.param_select.index(key)
            if number < len(self.parameters):
                self.state.active_param = number

        elif km.param_select_left.matches(key):
            if self.parameters:
                self.state.active_param = (self.state.active_param - 1) % len(self.parameters)

        elif km.param_select_right.matches(key):
            if self.parameters:
                self.state.active_param = (self.state.active_param + 1) % len(self.parameters)

        elif km.param_value_up.matches(key):
            self.param_value_press(1)

        elif km.param_value_down.matches(key):
            self.param_value_press(-1)

        elif km.help.matches(key):
            self.state.help_expanded = not self.state.help_expanded

        elif km.quit.matches(key):
            self.quit()

        else:
            return False
        return True

    # ── Mode-dependent actions ───────────────────────────────────

    def step_press(self, number: int):
        if self.state.mode == Mode.TRACK:
            self._select_track(number)
        elif self.state.mode == Mode.RECORD:
            step_index = number + self.state.active_track_page * STEPS_PER_PAGE
            self.seq.toggle_step(self.state.active_track, step_index)
            if step_index < self.step_count(self.state.active_track):
                self.state.active_step = step_index

    def step_toggle_press(self, number: int):
        if self.state.mode == Mode.TRACK:
            self.seq.toggle_track(number)
        elif self.state.mode == Mode.RECORD:
            # Reserved for per-step accents
            pass

    def add_press(self):
        if self.state.mode == Mode.TRACK:
            self.seq.add_track()
        elif self.state.mode == Mode.RECORD:
            self.seq.add_step(self.state.active_track)

    def remove_press(self):
        if self.state.mode == Mode.TRACK:
            if self.state.active_track > 0 and self.state.active_track == self.track_count() - 1:
                self._select_track(self.state.active_track - 1)
            self.seq.remove_track()
        elif self.state.mode == Mode.RECORD:
            remaining_steps_in_page = (self.step_count(self.state.active_track) - 1) % STEPS_PER_PAGE
            if self.state.active_track_page > 0 and remaining_steps_in_page == 0:
                self.state.active_track_page -= 1
            self.seq.remove_step(self.state.active_track)
            if self.state.active_step is not None and \
                    self.state.active_step >= self.step_count(self.state.active_track):
                self.state.active_step = None

    def param_value_press(self, delta: int):
        if 0 <= self.state.active_param < len(self.parameters):
            self.parameters[self.state.active_param].update(self.state.active_track, delta)

    def quit(self):
        """Halt playback before resetting, then end the event loop."""
        if self.seq.is_playing():
            self.seq.toggle_play()
        self.seq.reset()
        if self.on_quit is not None:
            self.on_quit()
