"""Tests for the host-side timer, keypad, display and save-state helpers."""

import numpy as np
import pytest
import jax.numpy as jnp
from chip8vm import (
    Quirks, create_state, execute, framebuffer, get_key, pixel_at, release_all,
    restore_state, save_state, set_key, sound_on, tick,
)
from chip8vm.timers import TIMER_FREQUENCY


class TestTick:
    """Test the 60 Hz timer tick."""

    def test_decrements_nonzero_timers(self, fresh_state):
        state = fresh_state.replace(delay_timer=jnp.uint8(3), sound_timer=jnp.uint8(1))
        state = tick(state)

        assert state.delay_timer == 2
        assert state.sound_timer == 0

    def test_zero_timers_stay_zero(self, fresh_state):
        state = tick(tick(fresh_state))

        assert state.delay_timer == 0
        assert state.sound_timer == 0

    def test_sound_flag(self, fresh_state):
        state = fresh_state.replace(sound_timer=jnp.uint8(2))
        assert sound_on(state)
        state = tick(state)
        assert sound_on(state)
        state = tick(state)
        assert not sound_on(state)

    def test_one_second_of_ticks(self, fresh_state):
        state = fresh_state.replace(delay_timer=jnp.uint8(255))
        for _ in range(TIMER_FREQUENCY):
            state = tick(state)
        assert state.delay_timer == 255 - TIMER_FREQUENCY

    def test_sets_vblank(self, fresh_state):
        assert not fresh_state.vblank
        assert tick(fresh_state).vblank


class TestKeypad:
    """Test key state updates."""

    def test_press_and_release(self, fresh_state):
        state = set_key(fresh_state, 0xF, True)
        assert get_key(state, 0xF)
        assert not get_key(state, 0xE)

        state = set_key(state, 0xF, False)
        assert not get_key(state, 0xF)

    def test_release_all(self, fresh_state):
        state = set_key(set_key(fresh_state, 0, True), 5, True)
        state = release_all(state)
        assert not state.keypad.any()

    @pytest.mark.parametrize("index", [-1, 16, 100])
    def test_key_out_of_range(self, fresh_state, index):
        with pytest.raises(ValueError):
            set_key(fresh_state, index, True)
        with pytest.raises(ValueError):
            get_key(fresh_state, index)


class TestDisplayAccess:
    """Test pixel queries and snapshots."""

    def test_pixel_at(self, fresh_state):
        state = fresh_state.replace(display=fresh_state.display.at[31, 63].set(True))
        assert pixel_at(state, 63, 31)
        assert not pixel_at(state, 0, 0)

    @pytest.mark.parametrize("x,y", [(64, 0), (0, 32), (-1, 0)])
    def test_pixel_out_of_range(self, fresh_state, x, y):
        with pytest.raises(ValueError):
            pixel_at(fresh_state, x, y)

    def test_framebuffer_snapshot(self, fresh_state):
        state = fresh_state.replace(display=fresh_state.display.at[2, 5].set(True))
        frame = framebuffer(state)

        assert isinstance(frame, np.ndarray)
        assert frame.shape == (32, 64)
        assert frame.dtype == np.bool_
        assert frame[2, 5]

        frame[0, 0] = True
        assert not pixel_at(state, 0, 0), "Snapshot is a copy"


class TestSaveState:
    """Test save-state serialization."""

    def test_restores_machine(self, fresh_state):
        state = execute(fresh_state, 0x6A42)
        state = execute(state, 0x2400)
        state = state.replace(
            display=state.display.at[4, 4].set(True),
            delay_timer=jnp.uint8(17),
        )

        restored = restore_state(create_state(), save_state(state))

        assert restored.V[0xA] == 0x42
        assert restored.pc == 0x400
        assert restored.stack.pointer == 1
        assert restored.display[4, 4]
        assert restored.delay_timer == 17
        assert restored.V.dtype == jnp.uint8

    def test_quirks_come_from_template(self, fresh_state):
        data = save_state(fresh_state)
        restored = restore_state(create_state(quirks=Quirks.schip()), data)
        assert restored.quirks == Quirks.schip()

    def test_restored_state_keeps_running(self, fresh_state):
        state = restore_state(fresh_state, save_state(execute(fresh_state, 0x6105)))
        state = execute(state, 0x7101)
        assert state.V[1] == 6
