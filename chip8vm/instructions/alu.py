"""CHIP-8 ALU operations (8xxx).

Each ``alu_*`` function maps ``(vx, vy)`` to ``(result, flag)``. The result is
written to VX before the flag is written to VF, so with VF as destination the
flag wins.
"""

import jax.numpy as jnp
from chip8vm.constants import FLAG_REGISTER
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction


def alu_or(vx, vy):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, jnp.zeros((), dtype=jnp.uint8)


def alu_and(vx, vy):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, jnp.zeros((), dtype=jnp.uint8)


def alu_xor(vx, vy):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, jnp.zeros((), dtype=jnp.uint8)


def alu_add(vx, vy):
    """8XY4 - Add: VX += VY, VF = carry."""
    result = jnp.astype(vx, jnp.int32) + vy
    return result & 0xFF, result > 0xFF


def alu_sub_xy(vx, vy):
    """8XY5 - Subtract: VX -= VY, VF = NOT borrow."""
    return (jnp.astype(vx, jnp.int32) - vy) & 0xFF, vx >= vy


def alu_sub_yx(vx, vy):
    """8XY7 - Subtract: VX = VY - VX, VF = NOT borrow."""
    return (jnp.astype(vy, jnp.int32) - vx) & 0xFF, vy >= vx


def alu_shift_right(value):
    """8XY6 - Shift right by one, VF = shifted-out bit."""
    return value >> 1, value & 1


def alu_shift_left(value):
    """8XYE - Shift left by one, VF = shifted-out bit."""
    return (jnp.astype(value, jnp.int32) << 1) & 0xFF, (value & 0x80) >> 7


def _write(state: EmulatorState, instruction: DecodedInstruction, result, flag=None) -> EmulatorState:
    new_V = state.V.at[instruction.x].set(jnp.astype(result, jnp.uint8))
    if flag is not None:
        new_V = new_V.at[FLAG_REGISTER].set(jnp.astype(flag, jnp.uint8))
    return state.replace(V=new_V)


def execute_load_register(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XY0 - Set: VX = VY."""
    return _write(state, instruction, state.V[instruction.y])


def make_logic_instruction(operation):
    """Factory for OR/AND/XOR; VF is cleared only with ``logic_resets_vf``."""
    def logic_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        result, flag = operation(state.V[instruction.x], state.V[instruction.y])
        return _write(state, instruction, result, flag if state.quirks.logic_resets_vf else None)
    return logic_instruction


def make_arithmetic_instruction(operation):
    """Factory for ADD/SUB/SUBN, which always set VF."""
    def arithmetic_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        result, flag = operation(state.V[instruction.x], state.V[instruction.y])
        return _write(state, instruction, result, flag)
    return arithmetic_instruction


def make_shift_instruction(operation):
    """Factory for shifts; the source is VY with ``shift_uses_vy``, else VX."""
    def shift_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        source = instruction.y if state.quirks.shift_uses_vy else instruction.x
        result, flag = operation(state.V[source])
        return _write(state, instruction, result, flag)
    return shift_instruction


execute_or = make_logic_instruction(alu_or)
execute_and = make_logic_instruction(alu_and)
execute_xor = make_logic_instruction(alu_xor)
execute_add_register = make_arithmetic_instruction(alu_add)
execute_sub = make_arithmetic_instruction(alu_sub_xy)
execute_subn = make_arithmetic_instruction(alu_sub_yx)
execute_shift_right = make_shift_instruction(alu_shift_right)
execute_shift_left = make_shift_instruction(alu_shift_left)
