"""Configuration file management."""
import json
from pathlib import Path
from typing import Optional, Union


class ConfigManager:
    """Manages application configuration."""

    MIN_TEMPO = 20.0
    MAX_TEMPO = 300.0

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        if config_file is None:
            config_file = Path(__file__).parent / "config.json"
        self.config_file = Path(config_file)
        self.config = self._load_config()

    def _load_config(self) -> dict:
        """Load configuration from file."""
        config = self._default_config()
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r') as f:
                    config.update(json.load(f))
            except Exception:
                return self._default_config()
        return config

    def _default_config(self) -> dict:
        """Return default configuration."""
        return {
            "selected_midi_device": None,
            "tempo": 120.0,
            "tracks": 1,
            "steps": 16,
        }

    def save_config(self):
        """Save configuration to file."""
        try:
            with open(self.config_file, 'w') as f:
                json.dump(self.config, f, indent=2)
        except Exception as e:
            print(f"Error saving config: {e}")

    # ── MIDI device ──────────────────────────────────────────────

    def get_selected_device(self) -> Optional[str]:
        """Get the saved MIDI output device."""
        return self.config.get("selected_midi_device")

    def set_selected_device(self, device_name: Optional[str]):
        """Save the selected MIDI output device."""
        self.config["selected_midi_device"] = device_name
        self.save_config()

    # ── Tempo ────────────────────────────────────────────────────

    def get_tempo(self) -> float:
        """Return the saved tempo in BPM (default 120)."""
        try:
            tempo = float(self.config.get("tempo", 120.0))
        except (TypeError, ValueError):
            return 120.0
        return max(self.MIN_TEMPO, min(self.MAX_TEMPO, tempo))

    def set_tempo(self, tempo: float):
        """Persist the tempo and save. Clamped to [20, 300]."""
        self.config["tempo"] = round(max(self.MIN_TEMPO, min(self.MAX_TEMPO, float(tempo))), 1)
        self.save_config()

    # ── Startup layout ───────────────────────────────────────────

    def get_initial_tracks(self) -> int:
        """Number of tracks the sequencer starts with."""
        return int(self.config.get("tracks", 1))

    def get_initial_steps(self) -> int:
        """Number of steps each starting track gets."""
        return int(self.config.get("steps", 16))
