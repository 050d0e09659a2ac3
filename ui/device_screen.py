"""MIDI output selection screen, shown at startup when no saved port is present."""
from typing import TYPE_CHECKING, Optional

from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Label, ListItem, ListView

if TYPE_CHECKING:
    from midi.device_manager import MIDIDeviceManager


class DeviceScreen(ModalScreen[Optional[str]]):
    """Pick the MIDI output port. Dismisses with the port name, or None to play silent."""

    BINDINGS = [
        Binding("escape", "skip", "Play silent", show=True),
        Binding("r", "refresh_devices", "Refresh", show=True),
        Binding("space", "select_and_close", "Select", show=True),
    ]

    CSS = """
    DeviceScreen {
        align: center middle;
    }

    #device-container {
        width: 70;
        height: auto;
        border: thick #FFA500;
        background: #1a1a1a;
        padding: 1 2;
    }

    #title {
        width: 100%;
        content-align: center middle;
        text-style: bold;
        color: #FFA500;
        margin-bottom: 1;
    }

    #device-list {
        width: 100%;
        height: 10;
        border: solid #FFA500;
        margin: 1 0;
    }

    #instructions {
        width: 100%;
        content-align: center middle;
        color: #888888;
        text-style: italic;
    }
    """

    def __init__(self, device_manager: 'MIDIDeviceManager'):
        super().__init__()
        self.device_manager = device_manager
        self.devices = []

    def compose(self):
        self.devices = self.device_manager.get_output_devices()
        with Vertical(id="device-container"):
            yield Label("MIDI Output", id="title")
            yield ListView(*self._device_items(), id="device-list")
            yield Label(
                "↑↓: Navigate | Space/Enter: Select | R: Refresh | Esc: Play silent",
                id="instructions"
            )

    def on_mount(self):
        self.query_one("#device-list", ListView).focus()

    def _device_items(self):
        if not self.devices:
            message = self.device_manager.last_error or "No MIDI output devices found"
            return [ListItem(Label(f"❌ {message}"))]

        selected = self.device_manager.get_selected_device()
        return [
            ListItem(Label(f"{'☑' if device == selected else '☐'} {device}"))
            for device in self.devices
        ]

    def refresh_device_list(self):
        """Refresh the list of output ports."""
        list_view = self.query_one("#device-list", ListView)
        list_view.clear()
        self.devices = self.device_manager.get_output_devices()
        for item in self._device_items():
            list_view.append(item)
        if self.devices:
            list_view.index = 0

    def action_refresh_devices(self):
        self.refresh_device_list()
        self.app.notify("Device list refreshed")

    def action_select_and_close(self):
        self._select(self.query_one("#device-list", ListView).index)

    def on_list_view_selected(self, event: ListView.Selected):
        self._select(event.list_view.index)

    def action_skip(self):
        self.dismiss(None)

    def _select(self, index: Optional[int]):
        if index is None or not 0 <= index < len(self.devices):
            return
        device = self.devices[index]
        if self.device_manager.select_device(device):
            self.app.notify(f"✓ Output: {device}")
            self.dismiss(device)
        else:
            self.app.notify(f"✗ Failed to select: {device}")
