"""Save-state support.

A save state is the msgpack encoding of every pytree leaf of the emulator
state. Quirk flags are static data and are not stored; they are taken from
the template state passed to :func:`restore_state`.
"""

import jax
import jax.numpy as jnp
from flax import serialization

from chip8vm.state import EmulatorState


def save_state(state: EmulatorState) -> bytes:
    """Serialize machine state to bytes."""
    return serialization.to_bytes(state)


def restore_state(template: EmulatorState, data: bytes) -> EmulatorState:
    """Rebuild a state from :func:`save_state` output using ``template``'s quirks."""
    restored = serialization.from_bytes(template, data)
    return jax.tree.map(jnp.asarray, restored)
