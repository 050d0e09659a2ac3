"""Colors and Rich styles used by the grid renderer."""

# Step cell backgrounds: (normal, dimmed for muted tracks)
CURRENT_COLOR = "#FFFF00"
CURRENT_DIMMED_COLOR = "#66661A"
ACTIVE_COLOR = "#FF5900"
ACTIVE_DIMMED_COLOR = "#6B3A1F"
INACTIVE_COLOR = "#3A3A3A"
INACTIVE_DIMMED_COLOR = "#1E1E1E"

PRIMARY_TEXT_COLOR = "#FFFFFF"
SECONDARY_TEXT_COLOR = "#121212"
MUTED_TEXT_COLOR = "#666666"
ACCENT_COLOR = "#FFA500"

STEP_PALETTES = {
    True: {"current": CURRENT_COLOR, "active": ACTIVE_COLOR, "inactive": INACTIVE_COLOR},
    False: {"current": CURRENT_DIMMED_COLOR, "active": ACTIVE_DIMMED_COLOR, "inactive": INACTIVE_DIMMED_COLOR},
}

LABEL_STYLE = f"{MUTED_TEXT_COLOR}"
VALUE_STYLE = f"bold {PRIMARY_TEXT_COLOR}"
SELECTED_STYLE = f"bold {SECONDARY_TEXT_COLOR} on {ACCENT_COLOR}"
TRACK_STYLE = f"{PRIMARY_TEXT_COLOR} on {INACTIVE_COLOR}"
TRACK_MUTED_STYLE = f"{MUTED_TEXT_COLOR} on {INACTIVE_DIMMED_COLOR}"
HELP_KEY_STYLE = f"bold {MUTED_TEXT_COLOR}"
HELP_DESC_STYLE = "#4A4A4A"
