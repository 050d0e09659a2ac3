"""Display names for MIDI note values using mingus."""
from typing import Optional, Sequence
import mingus.core.chords as chords
import mingus.core.notes as notes


def midi_to_note_name(midi_note: int) -> str:
    """Convert MIDI note number to note name with octave.

    Args:
        midi_note: MIDI note number (0-127).

    Returns:
        Note name with octave (e.g., "C4", "D#5"). MIDI note 60 is C4.
    """
    octave = (midi_note // 12) - 1
    return f"{notes.int_to_note(midi_note % 12)}{octave}"


def chord_name(chord: Sequence[int]) -> Optional[str]:
    """Best chord name mingus finds for the notes, or None.

    Single notes return their note name. Unrecognised stacks return None.
    """
    if not chord:
        return None
    unique_notes = []
    for n in sorted(chord):
        name = notes.int_to_note(n % 12)
        if name not in unique_notes:
            unique_notes.append(name)
    if len(unique_notes) == 1:
        return midi_to_note_name(chord[0])

    detected = chords.determine(unique_notes, shorthand=True)
    if detected:
        return detected[0]
    return None
