"""CHIP-8 virtual machine core."""

from chip8vm.constants import *
from chip8vm.quirks import Quirks
from chip8vm.state import EmulatorState, StackState, create_state
from chip8vm.faults import Fault
from chip8vm.errors import (
    Chip8Error, ExecutionError, IllegalOpcode, StackOverflow, StackUnderflow,
    AddressError, CapacityError,
)
from chip8vm.decode import Op, DecodedInstruction, decode, disassemble
from chip8vm.emulator import execute, fetch, step, run, raise_for_fault
from chip8vm.memory import load_rom, read_byte, write_byte
from chip8vm.timers import tick, sound_on
from chip8vm.keypad import set_key, get_key, release_all
from chip8vm.display import pixel_at, framebuffer
from chip8vm.serialization import save_state, restore_state
from chip8vm.config import VMConfig, load_config
from chip8vm.vm import Chip8, TraceEntry

__all__ = [
    "Chip8",
    "TraceEntry",
    "VMConfig",
    "load_config",
    "Quirks",
    "EmulatorState",
    "StackState",
    "create_state",
    "Fault",
    "Chip8Error",
    "ExecutionError",
    "IllegalOpcode",
    "StackOverflow",
    "StackUnderflow",
    "AddressError",
    "CapacityError",
    "Op",
    "DecodedInstruction",
    "decode",
    "disassemble",
    "fetch",
    "execute",
    "step",
    "run",
    "raise_for_fault",
    "load_rom",
    "read_byte",
    "write_byte",
    "tick",
    "sound_on",
    "set_key",
    "get_key",
    "release_all",
    "pixel_at",
    "framebuffer",
    "save_state",
    "restore_state",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
