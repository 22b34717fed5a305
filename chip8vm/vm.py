"""Host-facing CHIP-8 machine.

:class:`Chip8` wraps the functional core behind a mutable object for hosts
that drive the VM from an event loop: the renderer reads
:meth:`Chip8.framebuffer`, the audio side polls :attr:`Chip8.sound_on`,
input calls :meth:`Chip8.set_key` and the clock driver calls
:meth:`Chip8.step` / :meth:`Chip8.run` at the instruction rate and
:meth:`Chip8.tick` at 60 Hz.
"""

import threading
import time
from collections import deque
from typing import NamedTuple, Optional

import jax
import numpy as np

from chip8vm import display, keypad, memory, serialization
from chip8vm.config import VMConfig
from chip8vm.constants import MAX_ADDRESS
from chip8vm.decode import disassemble
from chip8vm.emulator import raise_for_fault, run, step_jit
from chip8vm.errors import ExecutionError, error_from_fault
from chip8vm.logging import VMLogger
from chip8vm.quirks import Quirks
from chip8vm.state import EmulatorState, create_state
from chip8vm.timers import sound_on, tick


class TraceEntry(NamedTuple):
    """One executed instruction in the history."""
    address: int
    opcode: int
    text: str


class Chip8:
    """A CHIP-8 virtual machine instance.

    Every public method holds :attr:`lock`, so a multi-threaded host can share
    one instance; the machine state is always consistent between calls.

    Once an instruction faults the machine is halted: :attr:`halt_reason`
    holds the error and further :meth:`step` / :meth:`run` calls raise it
    again until :meth:`load` resets the machine.

    Args:
        config: VM settings, defaults to ``VMConfig()``
        quirks: Quirk flags overriding the ones built from ``config``
        logger: Logger for lifecycle events
    """

    def __init__(
        self,
        config: Optional[VMConfig] = None,
        *,
        quirks: Optional[Quirks] = None,
        logger: Optional[VMLogger] = None,
    ):
        self.config = config if config is not None else VMConfig()
        self.quirks = quirks if quirks is not None else self.config.build_quirks()
        self.logger = logger if logger is not None else VMLogger()
        self.lock = threading.RLock()
        self.history = deque(maxlen=self.config.trace_length)
        self.halt_reason: Optional[ExecutionError] = None
        self.state: EmulatorState = create_state(
            jax.random.PRNGKey(self.config.seed), self.quirks, self.config.entry_point
        )

    @property
    def halted(self) -> bool:
        with self.lock:
            return self.halt_reason is not None

    def load(self, rom: bytes) -> None:
        """Reset the machine and load ``rom`` at the configured entry point."""
        with self.lock:
            rom = bytes(rom)
            self.state = memory.load_rom(self.state, rom, self.config.entry_point)
            self.history.clear()
            self.halt_reason = None
            self.logger.log_load(len(rom), self.config.entry_point, self.quirks)

    def _check_running(self):
        if self.halt_reason is not None:
            raise self.halt_reason

    def _raise_if_halted(self):
        try:
            raise_for_fault(self.state)
        except ExecutionError as error:
            self.halt_reason = error
            self.logger.log_halt(error)
            raise

    def _current_opcode(self) -> Optional[int]:
        address = int(self.state.pc)
        if address >= MAX_ADDRESS:
            return None
        high, low = np.asarray(self.state.memory[address:address + 2])
        return (int(high) << 8) | int(low)

    def step(self) -> None:
        """Execute exactly one instruction.

        Raises:
            ExecutionError: the instruction faulted, or the machine was
                already halted
        """
        with self.lock:
            self._check_running()
            address = int(self.state.pc)
            opcode = self._current_opcode()
            self.state = step_jit(self.state)
            if opcode is not None:
                self.history.appendleft(TraceEntry(address, opcode, disassemble(opcode, self.quirks)))
                self.logger.log_instruction(address, opcode, self.quirks)
            self._raise_if_halted()

    def run(self, n: int, progress: bool = False) -> None:
        """Execute up to ``n`` instructions in one compiled loop.

        Execution stops at the first fault, which is then raised. The
        instruction history is not updated by this call.
        """
        with self.lock:
            self._check_running()
            start = time.time()
            self.state = run(self.state, n, progress)
            self.logger.log_run(n, time.time() - start)
            self._raise_if_halted()

    def tick(self) -> None:
        """Advance the delay and sound timers by one 60 Hz period."""
        with self.lock:
            self.state = tick(self.state)

    @property
    def sound_on(self) -> bool:
        with self.lock:
            return sound_on(self.state)

    def set_key(self, index: int, pressed: bool) -> None:
        with self.lock:
            self.state = keypad.set_key(self.state, index, pressed)

    def get_key(self, index: int) -> bool:
        with self.lock:
            return keypad.get_key(self.state, index)

    def pixel_at(self, x: int, y: int) -> bool:
        with self.lock:
            return display.pixel_at(self.state, x, y)

    def framebuffer(self) -> np.ndarray:
        """Row-major (32, 64) boolean snapshot of the display."""
        with self.lock:
            return display.framebuffer(self.state)

    def read_byte(self, address: int) -> int:
        with self.lock:
            return memory.read_byte(self.state, address)

    def write_byte(self, address: int, value: int) -> None:
        with self.lock:
            self.state = memory.write_byte(self.state, address, value)

    def save_state(self) -> bytes:
        with self.lock:
            return serialization.save_state(self.state)

    def restore_state(self, data: bytes) -> None:
        """Replace the machine state with a :meth:`save_state` snapshot.

        A snapshot taken from a halted machine restores the halted state.
        """
        with self.lock:
            self.state = serialization.restore_state(self.state, data)
            self.history.clear()
            fault = int(self.state.fault)
            self.halt_reason = (
                error_from_fault(fault, int(self.state.fault_info), int(self.state.pc))
                if fault else None
            )
