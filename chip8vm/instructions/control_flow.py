"""CHIP-8 control flow instructions."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.faults import Fault, guard
from chip8vm.stack import is_full, push


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def _call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    state = state.replace(stack=push(state.stack, state.pc))
    return execute_jump(state, instruction)


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    return guard(~is_full(state.stack), Fault.STACK_OVERFLOW, state.pc, _call, state, instruction)


def skip_next(state: EmulatorState) -> EmulatorState:
    return state.replace(pc=jnp.astype(state.pc + 2, jnp.uint16))


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        condition = condition_fn(state, instruction)
        return jax.lax.cond(
            condition,
            skip_next,
            lambda s: s,
            state
        )
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y]
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y]
)

execute_skip_if_key = make_skip_instruction(
    lambda state, inst: state.keypad[state.V[inst.x] & 0xF]
)

execute_skip_if_not_key = make_skip_instruction(
    lambda state, inst: ~state.keypad[state.V[inst.x] & 0xF]
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to NNN + V0, or XNN + VX with the ``jump_uses_vx`` quirk.

    The target is not masked; a jump past the end of memory faults on the
    next fetch.
    """
    register = instruction.x if state.quirks.jump_uses_vx else 0
    offset = jnp.astype(state.V[register], jnp.uint16)
    return state.replace(pc=jnp.astype(instruction.nnn + offset, jnp.uint16))
