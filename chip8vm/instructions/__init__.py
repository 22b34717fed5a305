"""Instruction handlers, one module per opcode family.

Every handler has the signature ``(state, instruction) -> state`` and sees the
program counter already advanced past the instruction being executed.
"""
