"""CHIP-8 timer, keypad, index and block memory instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import FONT_START, FONT_CHAR_SIZE, MAX_ADDRESS, NUM_REGISTERS
from chip8vm.faults import Fault, guard


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register, VF untouched."""
    offset = jnp.astype(state.V[instruction.x], jnp.uint16)
    return state.replace(I=jnp.astype(state.I + offset, jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    While no key is down the PC is moved back onto this instruction, so the
    host keeps stepping it. Once keys are down, the lowest-indexed one is
    latched into VX.
    """
    def key_pressed_action(state):
        pressed_key = jnp.astype(jnp.argmax(state.keypad), jnp.uint8)
        return state.replace(V=state.V.at[instruction.x].set(pressed_key))

    def wait_action(state):
        return state.replace(pc=jnp.astype(state.pc - 2, jnp.uint16))

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, wait_action, state)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX (low nibble)."""
    digit = jnp.astype(state.V[instruction.x] & 0xF, jnp.uint16)
    return state.replace(I=jnp.astype(FONT_START + digit * FONT_CHAR_SIZE, jnp.uint16))


def _bcd(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = jnp.arange(3) + jnp.astype(state.I, jnp.int32)
    return state.replace(memory=state.memory.at[indices].set(digits))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    last_address = jnp.astype(state.I, jnp.int32) + 2
    return guard(
        last_address <= MAX_ADDRESS, Fault.ADDRESS_ERROR, last_address,
        _bcd, state, instruction
    )


def _block_indices(state: EmulatorState, instruction: DecodedInstruction):
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    base_indices = jnp.astype(state.I, jnp.int32) + jnp.arange(NUM_REGISTERS)
    return register_mask, base_indices


def _advance_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    if state.quirks.load_store_increments_i:
        return state.replace(I=jnp.astype(state.I + instruction.x + 1, jnp.uint16))
    return state


def _store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    register_mask, base_indices = _block_indices(state, instruction)
    current_memory_values = state.memory[base_indices]
    new_memory_values = jnp.where(register_mask, state.V, current_memory_values)
    new_memory = state.memory.at[base_indices].set(new_memory_values)
    return _advance_index(state.replace(memory=new_memory), instruction)


def _load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    register_mask, base_indices = _block_indices(state, instruction)
    memory_values = state.memory[base_indices]
    new_V = jnp.where(register_mask, memory_values, state.V)
    return _advance_index(state.replace(V=new_V), instruction)


def _block_transfer(action):
    def block_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        last_address = jnp.astype(state.I, jnp.int32) + jnp.astype(instruction.x, jnp.int32)
        return guard(
            last_address <= MAX_ADDRESS, Fault.ADDRESS_ERROR, last_address,
            action, state, instruction
        )
    return block_instruction


execute_store_registers = _block_transfer(_store_registers)
execute_store_registers.__doc__ = "FX55 - Store V0 through VX in memory starting at I."

execute_load_registers = _block_transfer(_load_registers)
execute_load_registers.__doc__ = "FX65 - Load V0 through VX from memory starting at I."
