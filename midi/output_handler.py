"""MIDI note output for the sequencer clock."""
import mido
from typing import Optional
from threading import Lock


class MIDIOutputHandler:
    """Sends note messages to one MIDI output port.

    Without an open port every send is silently dropped, so the sequencer
    can run with no device attached.
    """

    def __init__(self):
        self.port: Optional[mido.ports.BaseOutput] = None
        self.port_lock = Lock()

    def open_device(self, device_name: str) -> bool:
        """Open a MIDI output device.

        Args:
            device_name: Name of the MIDI device to open.

        Returns:
            True if device opened successfully, False otherwise.
        """
        try:
            self.close_device()
            with self.port_lock:
                self.port = mido.open_output(device_name)
            return True
        except Exception as e:
            print(f"Error opening MIDI device: {e}")
            return False

    def close_device(self):
        """Close the current MIDI output device."""
        with self.port_lock:
            if self.port:
                try:
                    self.port.close()
                except Exception as e:
                    print(f"Error closing MIDI device: {e}")
                finally:
                    self.port = None

    def is_device_open(self) -> bool:
        """Check if a MIDI device is currently open."""
        return self.port is not None

    def note_on(self, channel: int, note: int, velocity: int):
        self._send(mido.Message('note_on', channel=channel, note=note, velocity=velocity))

    def note_off(self, channel: int, note: int):
        self._send(mido.Message('note_off', channel=channel, note=note, velocity=0))

    def all_notes_off(self):
        """Send the all-notes-off controller on every channel."""
        for channel in range(16):
            self._send(mido.Message('control_change', channel=channel, control=123, value=0))

    def _send(self, msg: mido.Message):
        with self.port_lock:
            if not self.port:
                return
            try:
                self.port.send(msg)
            except Exception as e:
                print(f"Error sending MIDI message: {e}")
