"""Cursor and selection state of the sequencer view."""
from enum import Enum

STEPS_PER_PAGE = 16
STEPS_PER_LINE = 8


class Mode(Enum):
    """How the shared step key row is interpreted."""
    TRACK = "track"     # step keys select tracks
    RECORD = "record"   # step keys toggle steps of the active track


def page_count(num_steps: int) -> int:
    """Number of STEPS_PER_PAGE pages needed to show num_steps (at least 1)."""
    return max(1, -(-num_steps // STEPS_PER_PAGE))


class ViewState:
    """Mutable UI state threaded through the dispatcher and the renderer."""

    def __init__(self, width: int = 0, height: int = 0):
        self.active_track = 0
        self.active_track_page = 0
        self.active_param = 0
        self.active_step = None  # last step edited in record mode
        self.mode = Mode.TRACK
        self.width = width
        self.height = height
        self.help_expanded = False

    def __repr__(self) -> str:
        return (
            f"ViewState(track={self.active_track}, page={self.active_track_page}, "
            f"param={self.active_param}, mode={self.mode.name}, "
            f"size={self.width}x{self.height}, help={self.help_expanded})"
        )
