"""CHIP-8 display operations."""

import jax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import (
    FLAG_REGISTER, MAX_ADDRESS, MEMORY_SIZE, SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH,
)
from chip8vm.faults import Fault, guard

# Pre-computed coordinate grids for display operations, shape (height, width)
yy, xx = jnp.meshgrid(jnp.arange(SCREEN_HEIGHT), jnp.arange(SCREEN_WIDTH), indexing='ij')


def sprite_mask(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    """Boolean screen-sized mask of the sprite pixels that are set.

    The origin is taken modulo the screen size. Pixels running past the edge
    wrap around, or are clipped when the ``wrap_sprites`` quirk is off.
    """
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32) % SCREEN_WIDTH
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32) % SCREEN_HEIGHT

    col_offset = xx - sprite_x
    row_offset = yy - sprite_y
    if state.quirks.wrap_sprites:
        col_offset = col_offset % SCREEN_WIDTH
        row_offset = row_offset % SCREEN_HEIGHT

    in_sprite = (
        (col_offset >= 0) & (col_offset < SPRITE_WIDTH)
        & (row_offset >= 0) & (row_offset < instruction.n)
    )

    addresses = jnp.clip(jnp.astype(state.I, jnp.int32) + row_offset, 0, MEMORY_SIZE - 1)
    sprite_bytes = jnp.astype(state.memory[addresses], jnp.int32)
    shift = SPRITE_WIDTH - 1 - jnp.clip(col_offset, 0, SPRITE_WIDTH - 1)
    return (((sprite_bytes >> shift) & 1) == 1) & in_sprite


def _draw(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    sprite = sprite_mask(state, instruction)
    collision = jnp.any(state.display & sprite)
    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
        vblank=jnp.zeros((), dtype=jnp.bool_),
    )


def _draw_checked(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    last_address = jnp.astype(state.I, jnp.int32) + jnp.astype(instruction.n, jnp.int32) - 1
    in_bounds = (instruction.n == 0) | (last_address <= MAX_ADDRESS)
    return guard(in_bounds, Fault.ADDRESS_ERROR, last_address, _draw, state, instruction)


def _wait_for_vblank(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    return state.replace(pc=jnp.astype(state.pc - 2, jnp.uint16))


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - XOR-draw an N-row sprite from memory[I] at (VX, VY).

    VF is set to 1 when any lit pixel is turned off, else 0. With the
    ``display_wait`` quirk the instruction re-executes until the next timer
    tick has raised the vblank flag.
    """
    if state.quirks.display_wait:
        return jax.lax.cond(state.vblank, _draw_checked, _wait_for_vblank, state, instruction)
    return _draw_checked(state, instruction)
