"""Program loading and host-side memory access."""

import jax
import jax.numpy as jnp
from chip8vm.state import EmulatorState, create_state
from chip8vm.constants import MAX_ADDRESS, MEMORY_SIZE, PROGRAM_START
from chip8vm.errors import AddressError, CapacityError


def load_rom(state: EmulatorState, rom: bytes, entry_point: int = PROGRAM_START) -> EmulatorState:
    """Reset the machine and copy ``rom`` into memory at ``entry_point``.

    Everything except the quirk flags is reset: memory (font reloaded),
    registers, stack, timers, display, keypad and fault. The random key is
    split so reloading does not replay the previous run's numbers.

    Raises:
        ValueError: ``entry_point`` lies in the reserved region below 0x200
            or past the end of memory
        CapacityError: ``rom`` does not fit between ``entry_point`` and 0xFFF
    """
    if not PROGRAM_START <= entry_point <= MAX_ADDRESS:
        raise ValueError(
            f"Entry point 0x{entry_point:X} is outside the program area "
            f"(0x{PROGRAM_START:03X}-0x{MAX_ADDRESS:03X})"
        )
    capacity = MEMORY_SIZE - entry_point
    if len(rom) > capacity:
        raise CapacityError(len(rom), capacity)

    rng, _ = jax.random.split(state.rng)
    state = create_state(rng, state.quirks, entry_point)
    if not rom:
        return state
    rom_array = jnp.array(list(rom), dtype=jnp.uint8)
    new_memory = state.memory.at[entry_point:entry_point + len(rom)].set(rom_array)
    return state.replace(memory=new_memory)


def _check_address(address: int) -> int:
    address = int(address)
    if not 0 <= address <= MAX_ADDRESS:
        raise AddressError(address)
    return address


def read_byte(state: EmulatorState, address: int) -> int:
    """Read one byte; addresses outside 0x000-0xFFF raise ``AddressError``."""
    return int(state.memory[_check_address(address)])


def write_byte(state: EmulatorState, address: int, value: int) -> EmulatorState:
    """Write one byte; addresses outside 0x000-0xFFF raise ``AddressError``."""
    address = _check_address(address)
    if not 0 <= value <= 0xFF:
        raise ValueError(f"Byte value {value} is outside 0-255")
    return state.replace(memory=state.memory.at[address].set(jnp.uint8(value)))
