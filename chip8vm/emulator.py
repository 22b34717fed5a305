"""Main CHIP-8 emulator execution engine."""

from functools import partial

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import Op, decode
from chip8vm.constants import MAX_ADDRESS, MEMORY_SIZE
from chip8vm.errors import error_from_fault
from chip8vm.faults import Fault, guard, is_halted
from chip8vm.logging import scan_with_progress
from chip8vm.instructions.system import execute_illegal, execute_clear_screen, execute_return
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chip8vm.instructions.alu import (
    execute_load_register, execute_or, execute_and, execute_xor, execute_add_register,
    execute_sub, execute_shift_right, execute_subn, execute_shift_left
)
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)

HANDLERS = {
    Op.ILLEGAL: execute_illegal,
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_IMM: execute_skip_if_equal_immediate,
    Op.SNE_IMM: execute_skip_if_not_equal_immediate,
    Op.SE_REG: execute_skip_if_equal_register,
    Op.LD_IMM: execute_set,
    Op.ADD_IMM: execute_add,
    Op.LD_REG: execute_load_register,
    Op.OR: execute_or,
    Op.AND: execute_and,
    Op.XOR: execute_xor,
    Op.ADD_REG: execute_add_register,
    Op.SUB: execute_sub,
    Op.SHR: execute_shift_right,
    Op.SUBN: execute_subn,
    Op.SHL: execute_shift_left,
    Op.SNE_REG: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_OFFSET: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key,
    Op.SKNP: execute_skip_if_not_key,
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_VX_K: execute_wait_for_key,
    Op.LD_DT_VX: execute_set_delay_timer,
    Op.LD_ST_VX: execute_set_sound_timer,
    Op.ADD_I_VX: execute_add_to_index,
    Op.LD_F_VX: execute_font_character,
    Op.LD_B_VX: execute_bcd_conversion,
    Op.LD_MEM_VX: execute_store_registers,
    Op.LD_VX_MEM: execute_load_registers,
}


def execute(state: EmulatorState, instruction) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    The program counter is not advanced here; :func:`fetch` does that before
    dispatch.
    """
    decoded_instruction = decode(instruction)

    return jax.lax.switch(
        decoded_instruction.kind,
        [HANDLERS[op] for op in Op],
        state, decoded_instruction
    )


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.ndarray]:
    """Fetch the big-endian word at PC and advance PC by 2.

    A PC whose second byte would lie past 0xFFF faults with an address error
    instead and stays put; the returned word is then meaningless.
    """
    state = guard(
        state.pc < MAX_ADDRESS, Fault.ADDRESS_ERROR, jnp.maximum(state.pc, MEMORY_SIZE),
        lambda s: s, state
    )
    pc = jnp.minimum(state.pc, MAX_ADDRESS - 1)
    instruction = _pack_u16(state.memory[pc], state.memory[pc + 1])
    next_pc = jnp.where(is_halted(state), state.pc, state.pc + 2)
    return state.replace(pc=jnp.astype(next_pc, jnp.uint16)), instruction


def _fetch_and_execute(state: EmulatorState) -> EmulatorState:
    start_pc = state.pc
    state, instruction = fetch(state)
    state = jax.lax.cond(is_halted(state), lambda s, i: s, execute, state, instruction)
    # A halted machine points at the instruction that faulted.
    return state.replace(pc=jnp.where(is_halted(state), start_pc, state.pc))


def step(state: EmulatorState) -> EmulatorState:
    """Run one fetch-decode-execute cycle; a halted state is returned as is."""
    return jax.lax.cond(is_halted(state), lambda s: s, _fetch_and_execute, state)


def run_instruction(state, _):
    state = step(state)
    return state, None


@partial(jax.jit, static_argnums=1)
def run_n_instruction(state: EmulatorState, n: int) -> EmulatorState:
    """Execute up to ``n`` instructions; stepping stops changing state once halted."""
    state, _ = jax.lax.scan(run_instruction, state, length=n)
    return state


step_jit = jax.jit(step)


def raise_for_fault(state: EmulatorState) -> EmulatorState:
    """Raise the typed error for a halted state, else return it unchanged."""
    fault = int(state.fault)
    if fault != Fault.NONE:
        raise error_from_fault(fault, int(state.fault_info), int(state.pc))
    return state


def run(state: EmulatorState, n: int, progress: bool = False) -> EmulatorState:
    """Execute up to ``n`` instructions, optionally with a tqdm progress bar."""
    if not progress:
        return run_n_instruction(state, n)

    @scan_with_progress(n)
    def run_instruction_with_progress(state, _):
        return step(state), None

    def _scan(state):
        state, _ = jax.lax.scan(run_instruction_with_progress, state, jnp.arange(n))
        return state

    return jax.jit(_scan)(state)
