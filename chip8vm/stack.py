"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chip8vm.constants import STACK_SIZE
from chip8vm.state import StackState


def is_full(stack: StackState):
    return stack.pointer >= STACK_SIZE


def is_empty(stack: StackState):
    return stack.pointer == 0


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack. Callers check ``is_full`` first."""
    new_data = stack.data.at[stack.pointer].set(jnp.astype(address, jnp.uint16))
    return stack.replace(data=new_data, pointer=jnp.astype(stack.pointer + 1, jnp.uint8))


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack. Callers check ``is_empty`` first."""
    new_pointer = jnp.astype(stack.pointer - 1, jnp.uint8)
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
