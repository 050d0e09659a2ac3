"""ABOUTME: Sequencer view - the Textual widget hosting the step grid.
ABOUTME: Forwards key/resize/tick events to the dispatcher and re-renders ~30 times a second."""

from typing import Callable, Optional

from textual import events
from textual.widgets import Static

from .dispatcher import InputDispatcher
from .grid_renderer import render_frame
from .keymap import KeyMap, default_keymap
from .parameters import parameters as default_parameters
from .view_state import ViewState

# The engine clock runs on its own thread; the view only needs to refresh
# fast enough to follow it.
REFRESH_INTERVAL = 0.033


class SequencerView(Static):
    """Full-screen step sequencer grid."""

    # Cells wider than the terminal are cropped, never wrapped
    DEFAULT_CSS = """
    SequencerView {
        width: 100%;
        height: 100%;
        background: $surface;
        padding: 0;
        text-wrap: nowrap;
        text-overflow: clip;
    }
    """

    can_focus = True

    def __init__(self, seq, keymap: Optional[KeyMap] = None, params=None,
                 on_quit: Optional[Callable[[], None]] = None, **kwargs):
        super().__init__("", **kwargs)
        self.seq = seq
        self.keymap = keymap if keymap is not None else default_keymap()
        self.params = params if params is not None else default_parameters(seq)
        self.view_state = ViewState()
        self.dispatcher = InputDispatcher(
            seq, self.params, self.keymap, self.view_state,
            on_quit=on_quit if on_quit is not None else self._exit_app,
            on_render=self._refresh_frame,
        )
        self._refresh_timer = None

    def on_mount(self):
        self.focus()
        self.dispatcher.handle_resize(self.app.size.width, self.app.size.height)
        self._refresh_frame()
        self._refresh_timer = self.set_interval(REFRESH_INTERVAL, self.dispatcher.handle_tick)

    def on_unmount(self):
        if self._refresh_timer is not None:
            self._refresh_timer.stop()
            self._refresh_timer = None

    def on_resize(self, event: events.Resize):
        self.dispatcher.handle_resize(event.size.width, event.size.height)
        self._refresh_frame()

    def on_key(self, event: events.Key):
        if self.dispatcher.handle_key(event.key):
            event.stop()
            event.prevent_default()
            self._refresh_frame()

    def _refresh_frame(self):
        self.update(render_frame(self.seq, self.params, self.keymap, self.view_state))

    def _exit_app(self):
        self.app.exit()
