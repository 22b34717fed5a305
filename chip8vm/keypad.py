"""Host-side access to the 16-key hexadecimal keypad."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.constants import NUM_KEYS


def _check_key(index: int) -> int:
    index = int(index)
    if not 0 <= index < NUM_KEYS:
        raise ValueError(f"Key index {index} is outside 0x0-0x{NUM_KEYS - 1:X}")
    return index


def set_key(state: EmulatorState, index: int, pressed: bool) -> EmulatorState:
    """Mark key ``index`` as pressed or released."""
    index = _check_key(index)
    return state.replace(keypad=state.keypad.at[index].set(bool(pressed)))


def get_key(state: EmulatorState, index: int) -> bool:
    return bool(state.keypad[_check_key(index)])


def release_all(state: EmulatorState) -> EmulatorState:
    return state.replace(keypad=jnp.zeros_like(state.keypad))
