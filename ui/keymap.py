"""ABOUTME: Key binding table for the sequencer view - every recognised key chord.
ABOUTME: Multiplexed rows resolve a key to its 0-based physical position (ordinal)."""

from typing import Dict, List, Optional, Sequence

from textual.binding import Binding

# Physical rows on an AZERTY keyboard, left to right, as Textual key names.
# Ordinal = position here.
STEP_SELECT_KEYS = ["a", "z", "e", "r", "t", "y", "u", "i", "q", "s", "d", "f", "g", "h", "j", "k"]
STEP_TOGGLE_KEYS = ["A", "Z", "E", "R", "T", "Y", "U", "I", "Q", "S", "D", "F", "G", "H", "J", "K"]
TRACK_SELECT_KEYS = [
    "ampersand", "é", "quotation_mark", "apostrophe", "left_parenthesis",
    "minus", "è", "underscore", "ç", "à",
]
TRACK_TOGGLE_KEYS = ["1", "2", "3", "4", "5", "6", "7", "8", "9", "0"]
PARAM_SELECT_KEYS = ["w", "x", "c", "v", "b"]

# Printed symbol of each named key, for the help panel
KEY_DISPLAYS = {
    "ampersand": "&",
    "quotation_mark": "\"",
    "apostrophe": "'",
    "left_parenthesis": "(",
    "right_parenthesis": ")",
    "minus": "-",
    "underscore": "_",
    "equals_sign": "=",
    "question_mark": "?",
}


def row(keys: Sequence[str], action: str, description: str) -> List[Binding]:
    """One Binding per key of a multiplexed row. The action carries the ordinal."""
    return [
        Binding(key, f"{action}({i})", description, show=False, key_display=KEY_DISPLAYS.get(key))
        for i, key in enumerate(keys)
    ]


class KeyBinding:
    """A group of Textual bindings that trigger one action.

    When built with ``indexed=True`` the group also keeps an ordinal table
    mapping each key to its position in the declared list.
    """

    def __init__(self, bindings: Sequence[Binding], help_key: str = "", indexed: bool = False):
        self.bindings: List[Binding] = list(bindings)
        self.keys: List[str] = [binding.key for binding in self.bindings]
        self.help_key = help_key or "/".join(
            binding.key_display or binding.key for binding in self.bindings
        )
        self.help_desc = self.bindings[0].description if self.bindings else ""
        self.index_table: Optional[Dict[str, int]] = None
        if indexed:
            self.index_table = {key: i for i, key in enumerate(self.keys)}

    def __len__(self) -> int:
        return len(self.keys)

    def matches(self, key: str) -> bool:
        return key in self.keys

    def index(self, key: str) -> int:
        """Ordinal of a key in a multiplexed row. Only valid for matching keys."""
        if self.index_table is None:
            raise TypeError("binding has no ordinal table")
        return self.index_table[key]


class KeyMap:
    """All bindings of the sequencer view.

    Step rows and track rows come in select/toggle pairs that address the
    same ordinal range, so each pair must have the same number of keys.
    """

    def __init__(self, step_select_keys: Sequence[str] = STEP_SELECT_KEYS,
                 step_toggle_keys: Sequence[str] = STEP_TOGGLE_KEYS,
                 track_select_keys: Sequence[str] = TRACK_SELECT_KEYS,
                 track_toggle_keys: Sequence[str] = TRACK_TOGGLE_KEYS,
                 param_select_keys: Sequence[str] = PARAM_SELECT_KEYS):
        if len(step_select_keys) != len(step_toggle_keys):
            raise ValueError(
                f"step select/toggle rows differ in size "
                f"({len(step_select_keys)} != {len(step_toggle_keys)})"
            )
        if len(track_select_keys) != len(track_toggle_keys):
            raise ValueError(
                f"track select/toggle rows differ in size "
                f"({len(track_select_keys)} != {len(track_toggle_keys)})"
            )

        self.toggle_play = KeyBinding([
            Binding("space", "toggle_play", "toggle play", show=False),
        ])
        self.mode = KeyBinding([
            Binding("tab", "toggle_mode", "toggle mode (track, record)", show=False),
        ])

        self.add = KeyBinding([
            Binding("equals_sign", "add", "add track|step", show=False, key_display="="),
        ])
        self.remove = KeyBinding([
            Binding("right_parenthesis", "remove", "remove track|step", show=False, key_display=")"),
        ])

        self.step_select = KeyBinding(
            row(step_select_keys, "step_select",
                f"select track|toggle step 1 to {len(step_select_keys)}"),
            indexed=True,
        )
        self.step_toggle = KeyBinding(
            row(step_toggle_keys, "step_toggle", f"mute track 1 to {len(step_toggle_keys)}"),
            indexed=True,
        )
        self.track_select = KeyBinding(
            row(track_select_keys, "track_select", f"select track 1 to {len(track_select_keys)}"),
            indexed=True,
        )
        self.track_toggle = KeyBinding(
            row(track_toggle_keys, "track_toggle", f"mute track 1 to {len(track_toggle_keys)}"),
            indexed=True,
        )

        self.track_page_up = KeyBinding([Binding("p", "track_page_up", "track page up", show=False)])
        self.track_page_down = KeyBinding([Binding("m", "track_page_down", "track page down", show=False)])

        self.tempo_up = KeyBinding([
            Binding("pageup", "tempo('up')", "tempo up (1 bpm)", show=False, key_display="page up"),
        ])
        self.tempo_down = KeyBinding([
            Binding("pagedown", "tempo('down')", "tempo down (1 bpm)", show=False, key_display="page down"),
        ])
        # alt+ is an alias of the displayed ctrl+ chord
        self.tempo_fine_up = KeyBinding([
            Binding("ctrl+pageup", "tempo_fine('up')", "tempo up (0.1 bpm)", show=False),
            Binding("alt+pageup", "tempo_fine('up')", "tempo up (0.1 bpm)", show=False),
        ], help_key="ctrl+page up")
        self.tempo_fine_down = KeyBinding([
            Binding("ctrl+pagedown", "tempo_fine('down')", "tempo down (0.1 bpm)", show=False),
            Binding("alt+pagedown", "tempo_fine('down')", "tempo down (0.1 bpm)", show=False),
        ], help_key="ctrl+page down")

        self.param_select = KeyBinding(
            row(param_select_keys, "param_select", "select parameter"), indexed=True,
        )
        self.param_select_left = KeyBinding([
            Binding("left", "param_select('left')", "previous parameter", show=False, key_display="←"),
        ])
        self.param_select_right = KeyBinding([
            Binding("right", "param_select('right')", "next parameter", show=False, key_display="→"),
        ])
        self.param_value_up = KeyBinding([
            Binding("up", "param_value('up')", "increase selected parameter value", show=False, key_display="↑"),
        ])
        self.param_value_down = KeyBinding([
            Binding("down", "param_value('down')", "decrease selected parameter value", show=False, key_display="↓"),
        ])

        self.help = KeyBinding([
            Binding("question_mark", "toggle_help", "toggle help", show=False, key_display="?"),
        ])
        self.quit = KeyBinding([
            Binding("ctrl+c", "quit", "quit", show=False),
            Binding("escape", "quit", "quit", show=False),
        ], help_key="ctrl+c/esc")

    def short_help(self) -> List[KeyBinding]:
        """Bindings shown in the collapsed help line."""
        return [self.help, self.quit]

    def full_help(self) -> List[List[KeyBinding]]:
        """Bindings shown in the expanded help panel, one list per column."""
        return [
            [self.toggle_play, self.mode, self.add, self.remove,
             self.tempo_up, self.tempo_down, self.tempo_fine_up, self.tempo_fine_down],
            [self.step_select, self.step_toggle, self.track_select, self.track_toggle,
             self.track_page_up, self.track_page_down],
            [self.param_select, self.param_select_left, self.param_select_right,
             self.param_value_up, self.param_value_down, self.help, self.quit],
        ]


def default_keymap() -> KeyMap:
    """Return the default key mapping."""
    return KeyMap()
