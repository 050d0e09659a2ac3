"""MIDI output port discovery and the port Pasos plays through."""
import mido
import os
import sys
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from config_manager import ConfigManager
    from midi.output_handler import MIDIOutputHandler


class MIDIDeviceManager:
    """Lists output ports and remembers the chosen one in the config."""

    def __init__(self, config_manager: 'ConfigManager' = None):
        self.config_manager = config_manager
        self.selected_device: Optional[str] = None
        self.last_error: Optional[str] = None

        # A saved port only counts if it is still plugged in
        if self.config_manager:
            saved_device = self.config_manager.get_selected_device()
            if saved_device and saved_device in self.get_output_devices():
                self.selected_device = saved_device

    def get_output_devices(self) -> List[str]:
        """Names of the MIDI output ports, or [] with last_error set."""
        try:
            # ALSA prints to stderr when the sequencer is missing
            stderr_backup = sys.stderr
            with open(os.devnull, 'w') as devnull:
                sys.stderr = devnull
                try:
                    devices = mido.get_output_names()
                finally:
                    sys.stderr = stderr_backup

            self.last_error = None
            return devices
        except Exception as e:
            error_msg = str(e).lower()
            if "no such file" in error_msg and "snd/seq" in error_msg:
                self.last_error = "ALSA sequencer not available. Run: sudo modprobe snd-seq"
            elif "rtmidi" in error_msg:
                self.last_error = "No MIDI backend. Install python-rtmidi"
            else:
                self.last_error = f"Error: {e}"
            return []

    def select_device(self, device_name: str) -> bool:
        """Remember a port as the sequencer output. False if it is not present."""
        if device_name in self.get_output_devices():
            self.selected_device = device_name
            if self.config_manager:
                self.config_manager.set_selected_device(device_name)
            return True
        return False

    def get_selected_device(self) -> Optional[str]:
        """Get currently selected device name, or None."""
        return self.selected_device

    def open_selected(self, output: 'MIDIOutputHandler') -> bool:
        """Open the selected port on an output handler. False when none is selected."""
        if not self.selected_device:
            return False
        return output.open_device(self.selected_device)
