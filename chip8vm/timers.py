"""Delay and sound timers, driven by an external fixed-rate tick."""

import jax
import jax.numpy as jnp
from chip8vm.state import EmulatorState

TIMER_FREQUENCY = 60


def _decrement(timer: jnp.ndarray) -> jnp.ndarray:
    return jnp.where(timer > 0, timer - 1, timer).astype(jnp.uint8)


@jax.jit
def tick(state: EmulatorState) -> EmulatorState:
    """Advance both timers by one tick (conventionally 1/60 s).

    Each timer is decremented when nonzero and stays at zero otherwise. The
    tick also raises the vblank flag used by the ``display_wait`` quirk.
    """
    return state.replace(
        delay_timer=_decrement(state.delay_timer),
        sound_timer=_decrement(state.sound_timer),
        vblank=jnp.ones((), dtype=jnp.bool_),
    )


def sound_on(state: EmulatorState) -> bool:
    """Whether the host should be playing its tone."""
    return bool(state.sound_timer > 0)
