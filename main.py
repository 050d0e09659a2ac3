#!/usr/bin/env python3
"""Pasos step sequencer TUI - Main Entry Point."""
from typing import Optional

from textual.app import App
from textual.binding import Binding

from config_manager import ConfigManager
from midi.device_manager import MIDIDeviceManager
from midi.output_handler import MIDIOutputHandler
from sequencer.sequencer_engine import Sequencer
from ui.device_screen import DeviceScreen
from ui.sequencer_view import SequencerView


class PasosApp(App):
    """Terminal step sequencer application."""

    VERSION = "0.3.0"
    ENABLE_COMMAND_PALETTE = False
    CSS = """
    Screen {
        layout: vertical;
        overflow: hidden;
    }
    """

    # ctrl+c must reach the sequencer quit path before Textual's own quit
    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
    ]

    def __init__(self, config_manager: Optional[ConfigManager] = None,
                 sequencer: Optional[Sequencer] = None,
                 midi_output: Optional[MIDIOutputHandler] = None,
                 device_manager: Optional[MIDIDeviceManager] = None):
        super().__init__()
        self.title = f"Pasos v{self.VERSION}"
        self.config_manager = config_manager if config_manager is not None else ConfigManager()
        self.midi_output = midi_output
        self.device_manager = device_manager
        self.sequencer_view: Optional[SequencerView] = None

        if sequencer is None:
            if self.midi_output is None:
                self.midi_output = MIDIOutputHandler()
                if self.device_manager is None:
                    self.device_manager = MIDIDeviceManager(self.config_manager)
                # Auto-open saved MIDI device
                self.device_manager.open_selected(self.midi_output)

            sequencer = Sequencer(
                output=self.midi_output,
                tempo=self.config_manager.get_tempo(),
                num_tracks=self.config_manager.get_initial_tracks(),
                num_steps=self.config_manager.get_initial_steps(),
            )
        self.sequencer = sequencer

    def compose(self):
        self.sequencer_view = SequencerView(self.sequencer, id="sequencer-view")
        yield self.sequencer_view

    def on_mount(self):
        """Ask for an output port when none was saved."""
        if self.device_manager is not None and not self.device_manager.get_selected_device():
            self.push_screen(DeviceScreen(self.device_manager), self._on_device_chosen)
        self.update_sub_title()

    def _on_device_chosen(self, device: Optional[str]):
        if device and self.midi_output is not None:
            self.device_manager.open_selected(self.midi_output)
        self.update_sub_title()

    def update_sub_title(self):
        """Update sub title with device info."""
        selected = self.device_manager.get_selected_device() if self.device_manager else None
        if selected:
            self.sub_title = f"Output: {selected}"
        else:
            self.sub_title = "No MIDI output (silent)"

    def action_quit(self):
        """Quit through the sequencer view so playback is halted and reset first."""
        if self.sequencer_view is None:
            self.exit()
            return
        self.sequencer_view.dispatcher.quit()

    def on_unmount(self):
        """Clean up on exit."""
        if self.sequencer.is_playing():
            self.sequencer.toggle_play()
        self.config_manager.set_tempo(self.sequencer.tempo())
        if self.midi_output is not None:
            self.midi_output.close_device()


def main():
    """Main entry point."""
    app = PasosApp()
    app.run()


if __name__ == "__main__":
    main()
