"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chip8vm import Quirks, create_state


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state with default quirks for each test."""
    return create_state()


@pytest.fixture
def cosmac_state():
    """Provide a fresh state with COSMAC VIP quirks."""
    return create_state(quirks=Quirks.cosmac())


@pytest.fixture
def schip_state():
    """Provide a fresh state with SCHIP quirks."""
    return create_state(quirks=Quirks.schip())


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def set_registers(state, **registers):
    """Helper to set registers by name, e.g. ``set_registers(state, V1=0x10)``."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


def program(*words):
    """Assemble big-endian instruction words into ROM bytes."""
    rom = bytearray()
    for word in words:
        rom += word.to_bytes(2, "big")
    return bytes(rom)
