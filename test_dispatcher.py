#!/usr/bin/env python3
"""ABOUTME: Tests for the input dispatcher state machine.
ABOUTME: Covers every (mode, action) pair, cursor pre-adjustment and the quit order."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from sequencer.sequencer_engine import Sequencer
from ui.dispatcher import InputDispatcher
from ui.keymap import default_keymap
from ui.parameters import parameters
from ui.view_state import Mode, ViewState


class FakeClock:
    """Clock stand-in so tests never start the pulse thread."""

    def __init__(self):
        self.running = False

    def start(self):
        self.running = True

    def stop(self):
        self.running = False


class RecordingSequencer:
    """Engine double that records the order of transport calls."""

    def __init__(self, playing: bool):
        self.playing = playing
        self.calls = []

    def is_playing(self):
        return self.playing

    def toggle_play(self):
        self.calls.append("toggle_play")
        self.playing = not self.playing

    def reset(self):
        self.calls.append("reset")

    def tracks(self):
        return []


def make_dispatcher(num_tracks=1, num_steps=16, mode=Mode.TRACK):
    seq = Sequencer(num_tracks=num_tracks, num_steps=num_steps, clock=FakeClock())
    state = ViewState(width=160, height=60)
    state.mode = mode
    quits = []
    dispatcher = InputDispatcher(seq, parameters(seq), default_keymap(), state,
                                 on_quit=lambda: quits.append(True))
    dispatcher.quits = quits
    return dispatcher, seq, state


# ── Mode and help ────────────────────────────────────────────────


def test_mode_toggle_is_an_involution():
    dispatcher, seq, state = make_dispatcher(num_tracks=3, num_steps=40)
    state.active_track = 2
    state.active_track_page = 1
    state.active_param = 3
    before = repr(state)
    assert dispatcher.handle_key("tab")
    assert state.mode == Mode.RECORD
    dispatcher.handle_key("tab")
    assert state.mode == Mode.TRACK
    assert repr(state) == before


def test_help_toggle():
    dispatcher, _, state = make_dispatcher()
    dispatcher.handle_key("question_mark")
    assert state.help_expanded
    dispatcher.handle_key("question_mark")
    assert not state.help_expanded


def test_unmatched_key_is_ignored():
    dispatcher, seq, state = make_dispatcher()
    before = repr(state)
    assert not dispatcher.handle_key("f5")
    assert repr(state) == before
    assert len(seq.tracks()) == 1


# ── Select rows ──────────────────────────────────────────────────


def test_step_key_selects_track_in_track_mode():
    dispatcher, _, state = make_dispatcher(num_tracks=3)
    dispatcher.handle_key("e")
    assert state.active_track == 2


def test_step_key_beyond_track_count_is_noop():
    dispatcher, _, state = make_dispatcher(num_tracks=3)
    dispatcher.handle_key("r")
    assert state.active_track == 0


def test_track_row_selects_in_both_modes():
    for mode in (Mode.TRACK, Mode.RECORD):
        dispatcher, _, state = make_dispatcher(num_tracks=3, mode=mode)
        dispatcher.handle_key("é")
        assert state.active_track == 1
        dispatcher.handle_key("à")
        assert state.active_track == 1


def test_step_key_toggles_step_on_current_page_in_record_mode():
    dispatcher, seq, state = make_dispatcher(num_steps=32, mode=Mode.RECORD)
    state.active_track_page = 1
    dispatcher.handle_key("z")
    steps = seq.tracks()[0].steps()
    assert steps[17].is_active()
    assert not steps[1].is_active()
    assert state.active_step == 17
    assert state.active_track == 0


def test_step_key_past_last_step_is_noop_in_record_mode():
    dispatcher, seq, state = make_dispatcher(num_steps=4, mode=Mode.RECORD)
    dispatcher.handle_key("k")
    assert not any(step.is_active() for step in seq.tracks()[0].steps())
    assert state.active_step is None


def test_selecting_shorter_track_clamps_page():
    dispatcher, seq, state = make_dispatcher(num_tracks=2, num_steps=16)
    for _ in range(20):
        seq.add_step(0)
    state.active_track_page = 2
    dispatcher.handle_key("z")
    assert state.active_track == 1
    assert state.active_track_page == 0


# ── Toggle rows ──────────────────────────────────────────────────


def test_track_toggle_row_mutes_in_both_modes():
    for mode in (Mode.TRACK, Mode.RECORD):
        dispatcher, seq, _ = make_dispatcher(num_tracks=2, mode=mode)
        dispatcher.handle_key("2")
        assert seq.tracks()[1].is_active() is False
        assert seq.tracks()[0].is_active() is True


def test_step_toggle_row_mutes_track_in_track_mode():
    dispatcher, seq, _ = make_dispatcher(num_tracks=2)
    dispatcher.handle_key("Z")
    assert not seq.tracks()[1].is_active()


def test_step_toggle_row_is_reserved_in_record_mode():
    dispatcher, seq, state = make_dispatcher(num_tracks=2, mode=Mode.RECORD)
    before = repr(state)
    assert dispatcher.handle_key("Z")
    assert all(track.is_active() for track in seq.tracks())
    assert not any(step.is_active() for step in seq.tracks()[0].steps())
    assert repr(state) == before


# ── Add / remove ─────────────────────────────────────────────────


def test_add_in_each_mode():
    dispatcher, seq, _ = make_dispatcher()
    dispatcher.handle_key("equals_sign")
    assert len(seq.tracks()) == 2
    dispatcher.handle_key("tab")
    dispatcher.handle_key("equals_sign")
    assert len(seq.tracks()[0].steps()) == 17
    assert len(seq.tracks()[1].steps()) == 16


def test_remove_last_active_track_moves_cursor_first():
    dispatcher, seq, state = make_dispatcher(num_tracks=3)
    state.active_track = 2
    dispatcher.handle_key("right_parenthesis")
    assert state.active_track == 1
    assert len(seq.tracks()) == 2


def test_remove_track_keeps_cursor_when_not_last():
    dispatcher, seq, state = make_dispatcher(num_tracks=3)
    state.active_track = 1
    dispatcher.handle_key("right_parenthesis")
    assert state.active_track == 1
    assert len(seq.tracks()) == 2


def test_remove_only_track_is_noop():
    dispatcher, seq, state = make_dispatcher(num_tracks=1)
    dispatcher.handle_key("right_parenthesis")
    assert state.active_track == 0
    assert len(seq.tracks()) == 1


def test_remove_first_step_of_last_page_moves_page_back():
    dispatcher, seq, state = make_dispatcher(num_steps=17, mode=Mode.RECORD)
    state.active_track_page = 1
    dispatcher.handle_key("right_parenthesis")
    assert state.active_track_page == 0
    assert len(seq.tracks()[0].steps()) == 16


def test_remove_step_keeps_page_when_page_not_emptied():
    dispatcher, seq, state = make_dispatcher(num_steps=18, mode=Mode.RECORD)
    state.active_track_page = 1
    dispatcher.handle_key("right_parenthesis")
    assert state.active_track_page == 1
    assert len(seq.tracks()[0].steps()) == 17


def test_remove_step_on_first_page_stays_at_zero():
    dispatcher, seq, state = make_dispatcher(num_steps=17, mode=Mode.RECORD)
    dispatcher.handle_key("right_parenthesis")
    assert state.active_track_page == 0
    assert len(seq.tracks()[0].steps()) == 16


def test_remove_step_clears_edit_cursor_past_end():
    dispatcher, seq, state = make_dispatcher(num_steps=16, mode=Mode.RECORD)
    dispatcher.handle_key("k")
    assert state.active_step == 15
    dispatcher.handle_key("right_parenthesis")
    assert state.active_step is None


def test_edit_cursor_is_dropped_on_track_switch():
    dispatcher, seq, state = make_dispatcher(num_tracks=2, mode=Mode.RECORD)
    dispatcher.handle_key("e")
    assert state.active_step == 2
    dispatcher.handle_key("é")
    assert state.active_track == 1
    assert state.active_step is None
    # Reselecting the same track keeps the cursor
    dispatcher.handle_key("z")
    dispatcher.handle_key("é")
    assert state.active_step == 1


def test_removing_last_track_drops_edit_cursor():
    dispatcher, seq, state = make_dispatcher(num_tracks=2, mode=Mode.RECORD)
    dispatcher.handle_key("é")
    dispatcher.handle_key("t")
    assert state.active_step == 4
    dispatcher.handle_key("tab")
    dispatcher.handle_key("right_parenthesis")
    assert len(seq.tracks()) == 1
    assert state.active_track == 0
    assert state.active_step is None


# ── Pages ────────────────────────────────────────────────────────


@pytest.mark.parametrize("num_steps", [1, 16, 17, 33, 64])
def test_page_up_then_down_round_trips(num_steps):
    dispatcher, _, state = make_dispatcher(num_steps=num_steps)
    pages = -(-num_steps // 16)
    for start in range(pages):
        state.active_track_page = start
        dispatcher.handle_key("p")
        dispatcher.handle_key("m")
        assert state.active_track_page == start
        dispatcher.handle_key("m")
        dispatcher.handle_key("p")
        assert state.active_track_page == start


def test_page_keys_wrap():
    dispatcher, _, state = make_dispatcher(num_steps=48)
    dispatcher.handle_key("m")
    assert state.active_track_page == 2
    dispatcher.handle_key("p")
    assert state.active_track_page == 0


# ── Tempo ────────────────────────────────────────────────────────


def test_tempo_keys():
    dispatcher, seq, _ = make_dispatcher()
    seq.set_tempo(120.0)
    dispatcher.handle_key("pageup")
    assert seq.tempo() == pytest.approx(121.0)
    dispatcher.handle_key("pagedown")
    dispatcher.handle_key("pagedown")
    assert seq.tempo() == pytest.approx(119.0)
    dispatcher.handle_key("ctrl+pageup")
    assert seq.tempo() == pytest.approx(119.1)
    dispatcher.handle_key("alt+pagedown")
    dispatcher.handle_key("ctrl+pagedown")
    assert seq.tempo() == pytest.approx(118.9)


# ── Parameters ───────────────────────────────────────────────────


def test_param_row_selects_parameter():
    dispatcher, _, state = make_dispatcher()
    dispatcher.handle_key("v")
    assert state.active_param == 3


def test_param_row_beyond_parameter_list_is_noop():
    seq = Sequencer(clock=FakeClock())
    state = ViewState()
    dispatcher = InputDispatcher(seq, parameters(seq)[:2], default_keymap(), state)
    dispatcher.handle_key("x")
    dispatcher.handle_key("b")
    assert state.active_param == 1


def test_param_left_right_cycle():
    dispatcher, _, state = make_dispatcher()
    dispatcher.handle_key("left")
    assert state.active_param == len(dispatcher.parameters) - 1
    dispatcher.handle_key("right")
    assert state.active_param == 0


def test_param_value_updates_active_track():
    dispatcher, seq, state = make_dispatcher(num_tracks=2)
    state.active_track = 1
    dispatcher.handle_key("x")  # velocity
    dispatcher.handle_key("up")
    assert seq.tracks()[1].velocity() == 101
    assert seq.tracks()[0].velocity() == 100
    dispatcher.handle_key("down")
    dispatcher.handle_key("down")
    assert seq.tracks()[1].velocity() == 99


# ── Transport ────────────────────────────────────────────────────


def test_space_toggles_play():
    dispatcher, seq, _ = make_dispatcher()
    dispatcher.handle_key("space")
    assert seq.is_playing()
    assert seq.clock.running
    dispatcher.handle_key("space")
    assert not seq.is_playing()


def test_quit_while_playing_halts_before_reset():
    seq = RecordingSequencer(playing=True)
    quits = []
    dispatcher = InputDispatcher(seq, [], default_keymap(), ViewState(),
                                 on_quit=lambda: quits.append(list(seq.calls)))
    dispatcher.handle_key("escape")
    assert seq.calls == ["toggle_play", "reset"]
    assert quits == [["toggle_play", "reset"]]


def test_quit_while_stopped_only_resets():
    seq = RecordingSequencer(playing=False)
    dispatcher = InputDispatcher(seq, [], default_keymap(), ViewState())
    dispatcher.handle_key("ctrl+c")
    assert seq.calls == ["reset"]


# ── Resize / tick ────────────────────────────────────────────────


def test_resize_only_stores_size():
    dispatcher, _, state = make_dispatcher(num_tracks=2)
    state.active_track = 1
    dispatcher.handle_resize(80, 24)
    assert (state.width, state.height) == (80, 24)
    assert state.active_track == 1


def test_tick_leaves_indices_alone():
    dispatcher, _, state = make_dispatcher()
    before = repr(state)
    dispatcher.handle_tick()
    assert repr(state) == before


def test_tick_requests_one_render():
    dispatcher, _, state = make_dispatcher()
    renders = []
    dispatcher.on_render = lambda: renders.append(True)
    before = repr(state)
    dispatcher.handle_tick()
    assert renders == [True]
    assert repr(state) == before
