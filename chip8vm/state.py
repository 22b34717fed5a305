"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chip8vm.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, NUM_KEYS, NUM_REGISTERS,
    SCREEN_WIDTH, SCREEN_HEIGHT, STACK_SIZE,
)
from chip8vm.quirks import Quirks


def _zeros(shape, dtype):
    return field(default_factory=lambda: jnp.zeros(shape, dtype=dtype))


@dataclass(frozen=True)
class StackState:
    """Return-address stack for subroutine calls."""
    data: jnp.ndarray = _zeros(STACK_SIZE, jnp.uint16)
    pointer: jnp.ndarray = _zeros((), jnp.uint8)


class EmulatorState(PyTreeNode):
    """Complete CHIP-8 machine state.

    The display is row-major with shape (SCREEN_HEIGHT, SCREEN_WIDTH) and is
    indexed ``display[y, x]``. ``fault`` is nonzero once the machine halted,
    see :mod:`chip8vm.faults`.
    """
    rng: jax.Array
    memory: jnp.ndarray = _zeros(MEMORY_SIZE, jnp.uint8)
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = _zeros((SCREEN_HEIGHT, SCREEN_WIDTH), jnp.bool_)
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = _zeros((), jnp.uint8)
    sound_timer: jnp.ndarray = _zeros((), jnp.uint8)
    keypad: jnp.ndarray = _zeros(NUM_KEYS, jnp.bool_)
    V: jnp.ndarray = _zeros(NUM_REGISTERS, jnp.uint8)
    I: jnp.ndarray = _zeros((), jnp.uint16)
    vblank: jnp.ndarray = _zeros((), jnp.bool_)
    fault: jnp.ndarray = _zeros((), jnp.uint8)
    fault_info: jnp.ndarray = _zeros((), jnp.uint16)
    quirks: Quirks = field(pytree_node=False, default=Quirks())


def create_state(
    rng: jax.Array = None,
    quirks: Quirks = None,
    entry_point: int = PROGRAM_START,
) -> EmulatorState:
    """Create a zeroed machine with font data loaded and PC at ``entry_point``."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    if quirks is None:
        quirks = Quirks()
    state = EmulatorState(rng, quirks=quirks, pc=jnp.asarray(entry_point, dtype=jnp.uint16))
    font = jnp.array(FONT_DATA, dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(font))
