"""ABOUTME: Grid renderer - builds one terminal frame from sequencer + view state.
ABOUTME: Pure functions: cell sizing and velocity bars are recomputed every frame."""

from typing import List, Sequence, Tuple

from rich.text import Text

from music.note_names import midi_to_note_name
from sequencer.track import PULSES_PER_STEP

from . import theme
from .view_state import STEPS_PER_LINE, STEPS_PER_PAGE, Mode, ViewState, page_count

APP_TITLE = "PASOS"

STEP_WIDTH = 15
STEP_HEIGHT = STEP_WIDTH // 2

# Cell text padding (top, left)
CONTENT_PAD_TOP = 1
CONTENT_PAD_LEFT = 2

ACTIVE_STEP_MARKER = "♦"
VELOCITY_GLYPH = "█"


def step_size(width: int) -> Tuple[int, int]:
    """Cell (width, height) for a terminal width; never below (15, 7)."""
    step_width = width // STEPS_PER_LINE - 2
    step_height = step_width // 2 - 1
    if step_width < STEP_WIDTH or step_height < STEP_HEIGHT:
        return STEP_WIDTH, STEP_HEIGHT
    return step_width, step_height


def velocity_blank_rows(velocity: int, height: int) -> int:
    """Empty rows at the top of a velocity bar of the given height."""
    return (127 - velocity) * height // 127


def velocity_indicator(velocity: int, height: int) -> List[str]:
    """Velocity bar, top to bottom: blanks then filled rows from the bottom."""
    blank = velocity_blank_rows(velocity, height)
    return [" " if row < blank else VELOCITY_GLYPH for row in range(height)]


def step_variant(step, is_playing: bool) -> str:
    """'current', 'active' or 'inactive', in that order of precedence."""
    if is_playing and step.is_current_step():
        return "current"
    if step.is_active():
        return "active"
    return "inactive"


def step_content(step, state: ViewState, pages: int) -> List[str]:
    """Text lines shown inside a step cell."""
    if not step.is_active():
        return [str(step.position() + 1)]

    marker = ACTIVE_STEP_MARKER if step.position() == state.active_step else ""
    chord = step.chord()
    note = midi_to_note_name(chord[0]) if chord else ""
    length = f"{step.length() / float(PULSES_PER_STEP):.1f}/{pages * STEPS_PER_PAGE}"
    return [
        f"{step.position() + 1}{marker}",
        note,
        f"{length}  {step.probability()}%",
    ]


def render_step(step, is_playing: bool, state: ViewState, pages: int) -> List[Text]:
    """
    Render one step as rows of Text, all of the same display width.

    The first row is the top margin. Active, non-current steps get a
    velocity bar beside the cell.

    Args:
        step: Sequencer step
        is_playing: Whether the transport is running
        state: View state (terminal width, edit cursor)
        pages: Page count of the step's track

    Returns:
        height + 1 rows, each step_width + 2 columns wide
    """
    width, height = step_size(state.width)
    variant = step_variant(step, is_playing)
    color = theme.STEP_PALETTES[step.track().is_active()][variant]
    cell_style = f"bold {theme.SECONDARY_TEXT_COLOR} on {color}"

    content = step_content(step, state, pages)
    inner_width = max(0, width - CONTENT_PAD_LEFT - 1)

    bar = None
    if variant == "active":
        bar = velocity_indicator(step.velocity(), height)

    rows = [Text(" " * (width + 2))]
    for row in range(height):
        line_index = row - CONTENT_PAD_TOP
        text = ""
        if 0 <= line_index < len(content):
            text = content[line_index][:inner_width]
        cell = (" " * CONTENT_PAD_LEFT + text).ljust(width)
        line = Text(cell, style=cell_style)
        if bar is not None:
            line.append(bar[row], style=color)
            line.append(" ")
        else:
            line.append("  ")
        rows.append(line)
    return rows


def _join_horizontal(blocks: Sequence[List[Text]]) -> List[Text]:
    rows = []
    for parts in zip(*blocks):
        line = Text()
        for part in parts:
            line.append_text(part)
        rows.append(line)
    return rows


def render_steps(seq, state: ViewState) -> List[Text]:
    """Step cells of the active track's current page, STEPS_PER_LINE per row."""
    tracks = seq.tracks()
    if not 0 <= state.active_track < len(tracks):
        return []
    steps = tracks[state.active_track].steps()
    pages = page_count(len(steps))
    start = state.active_track_page * STEPS_PER_PAGE
    page_steps = steps[start:start + STEPS_PER_PAGE]
    is_playing = seq.is_playing()

    lines: List[Text] = []
    for first in range(0, len(page_steps), STEPS_PER_LINE):
        cells = [render_step(step, is_playing, state, pages)
                 for step in page_steps[first:first + STEPS_PER_LINE]]
        lines.extend(_join_horizontal(cells))
    return lines


def render_transport(seq, state: ViewState) -> List[Text]:
    """Title, play state, tempo, mode and page position on one line."""
    tracks = seq.tracks()
    num_steps = 0
    if 0 <= state.active_track < len(tracks):
        num_steps = len(tracks[state.active_track].steps())

    line = Text()
    line.append(f" {APP_TITLE} ", style=theme.SELECTED_STYLE)
    line.append("  ")
    if seq.is_playing():
        line.append("▶ PLAYING", style=theme.VALUE_STYLE)
    else:
        line.append("■ STOPPED", style=theme.LABEL_STYLE)
    line.append("  ")
    line.append(f"{seq.tempo():.1f}", style=theme.VALUE_STYLE)
    line.append(" BPM  ", style=theme.LABEL_STYLE)
    line.append("mode ", style=theme.LABEL_STYLE)
    mode_style = theme.SELECTED_STYLE if state.mode == Mode.RECORD else theme.VALUE_STYLE
    line.append(state.mode.name, style=mode_style)
    line.append("  page ", style=theme.LABEL_STYLE)
    line.append(f"{state.active_track_page + 1}/{page_count(num_steps)}", style=theme.VALUE_STYLE)
    line.append("  steps ", style=theme.LABEL_STYLE)
    line.append(str(num_steps), style=theme.VALUE_STYLE)
    return [line]


def render_tracks(seq, state: ViewState) -> List[Text]:
    """One badge per track: selected track highlighted, muted tracks dimmed."""
    line = Text()
    line.append("tracks ", style=theme.LABEL_STYLE)
    for i, track in enumerate(seq.tracks()):
        if i == state.active_track:
            style = theme.SELECTED_STYLE
        elif track.is_active():
            style = theme.TRACK_STYLE
        else:
            style = theme.TRACK_MUTED_STYLE
        label = f" {i + 1} " if track.is_active() else f"({i + 1})"
        line.append(label, style=style)
        line.append(" ")
    return [line]


def render_params(parameters: Sequence, state: ViewState) -> List[Text]:
    """Parameter names with their value for the active track."""
    line = Text()
    for i, param in enumerate(parameters):
        style = theme.SELECTED_STYLE if i == state.active_param else theme.LABEL_STYLE
        line.append(f" {param.name} ", style=style)
        line.append(f" {param.value(state.active_track)}", style=theme.VALUE_STYLE)
        line.append("   ")
    return [Text(""), line]


def render_help(keymap, state: ViewState) -> List[Text]:
    """Short help line, or the full help columns when help is expanded."""
    if not state.help_expanded:
        line = Text()
        for i, binding in enumerate(keymap.short_help()):
            if i:
                line.append(" • ", style=theme.HELP_DESC_STYLE)
            line.append(binding.help_key, style=theme.HELP_KEY_STYLE)
            line.append(f" {binding.help_desc}", style=theme.HELP_DESC_STYLE)
        return [line]

    columns = keymap.full_help()
    column_widths = [
        max(len(b.help_key) + 1 + len(b.help_desc) for b in column) for column in columns
    ]
    rows = []
    for row in range(max(len(column) for column in columns)):
        line = Text()
        for column, col_width in zip(columns, column_widths):
            if row < len(column):
                binding = column[row]
                used = len(binding.help_key) + 1 + len(binding.help_desc)
                line.append(binding.help_key, style=theme.HELP_KEY_STYLE)
                line.append(f" {binding.help_desc}", style=theme.HELP_DESC_STYLE)
                line.append(" " * (col_width - used))
            else:
                line.append(" " * col_width)
            line.append("    ")
        rows.append(line)
    return rows


def render_frame(seq, parameters: Sequence, keymap, state: ViewState) -> Text:
    """
    Full frame: transport, tracks, step grid, parameters, filler, help.

    The filler pads the frame to exactly state.height rows when the content
    fits; it is empty when the content already fills the terminal. Lines
    wider than the terminal are cropped rather than wrapped.
    """
    main_view = (
        render_transport(seq, state)
        + [Text("")]
        + render_tracks(seq, state)
        + render_steps(seq, state)
        + render_params(parameters, state)
    )
    help_view = render_help(keymap, state)
    filler = max(0, state.height - len(main_view) - len(help_view))

    return Text("\n", no_wrap=True, overflow="crop").join(main_view + [Text("")] * filler + help_view)
