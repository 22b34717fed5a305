"""Console logging utilities for the CHIP-8 core.

This module provides a small levelled console logger, a VM-specific logger
that reports program loads, halts and run summaries, and real-time progress
bars for long jit-compiled runs using io_callback.
"""

import time
import sys
from typing import Callable, Optional, Tuple

import jax
from jax.experimental import io_callback

from tqdm import tqdm

from chip8vm.decode import disassemble


class ConsoleLogger:
    """Flexible console logger with levels, colours and timestamps."""

    def __init__(
        self,
        name: str = "chip8vm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream=None,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.stream = stream if stream is not None else sys.stdout
        self.use_colors = (
            use_colors and hasattr(self.stream, "isatty") and self.stream.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, file=self.stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


class VMLogger(ConsoleLogger):
    """Logger for VM lifecycle events."""

    def __init__(self, name: str = "chip8vm", **kwargs):
        kwargs.setdefault("log_level", "WARNING")
        super().__init__(name, **kwargs)

    def log_load(self, size: int, entry_point: int, quirks):
        self.info(f"Loaded {size} byte ROM at 0x{entry_point:03X}")
        self.debug(f"  quirks: {quirks}")

    def log_instruction(self, address: int, opcode: int, quirks=None):
        self.debug(f"0x{address:03X}: {opcode:04X}  {disassemble(opcode, quirks)}")

    def log_halt(self, error: Exception):
        self.error(f"CPU halted: {error}")

    def log_run(self, instructions: int, elapsed: float):
        rate = instructions / elapsed if elapsed > 0 else float("inf")
        self.debug(f"Ran {instructions:,} instructions in {elapsed:.3f}s ({rate:,.0f}/s)")


def build_tqdm_progress_bar(
    n: int,
    print_rate: Optional[int] = None,
    desc: str = None,
    **kwargs,
) -> Tuple[Callable, Callable]:
    """Build real-time tqdm progress bar for JAX computations."""
    if desc is None:
        desc = f"Running ({n:,} instructions)"

    for kwarg in ("total", "mininterval", "maxinterval", "miniters"):
        kwargs.pop(kwarg, None)

    tqdm_bars = {}

    if print_rate is None:
        print_rate = max(1, min(n // 20, 50))
    else:
        print_rate = max(1, min(print_rate, n))

    remainder = n % print_rate

    def _define_tqdm():
        tqdm_bars[0] = tqdm(total=n, desc=desc, unit="instr", **kwargs)

    def _update_tqdm(steps):
        if 0 in tqdm_bars:
            tqdm_bars[0].update(int(steps))

    def _close_tqdm():
        if 0 in tqdm_bars:
            bar = tqdm_bars[0]
            bar.update(n - bar.n)
            bar.close()

    def _update_progress_bar(iter_num):
        _ = jax.lax.cond(
            iter_num == 0,
            lambda _: io_callback(_define_tqdm, None, ordered=True),
            lambda _: None,
            operand=None,
        )

        _ = jax.lax.cond(
            (iter_num % print_rate == 0) & (iter_num != n - remainder) & (iter_num > 0),
            lambda _: io_callback(_update_tqdm, None, print_rate, ordered=True),
            lambda _: None,
            operand=None,
        )

        _ = jax.lax.cond(
            iter_num == n - remainder,
            lambda _: io_callback(_update_tqdm, None, remainder, ordered=True),
            lambda _: None,
            operand=None,
        )

    def close_progress_bar(result, iter_num):
        _ = jax.lax.cond(
            iter_num == n - 1,
            lambda _: io_callback(_close_tqdm, None, ordered=True),
            lambda _: None,
            operand=None,
        )
        return result

    return _update_progress_bar, close_progress_bar


def scan_with_progress(
    n: int,
    print_rate: Optional[int] = None,
    desc: str = None,
    **tqdm_kwargs,
) -> Callable:
    """Decorator to add real-time progress bar to JAX scan operations."""
    _update_progress_bar, close_progress_bar = build_tqdm_progress_bar(
        n, print_rate, desc, **tqdm_kwargs
    )

    def _scan_progress_decorator(func):
        def wrapper_with_progress(carry, x):
            if isinstance(x, tuple):
                iter_num = x[0]
            else:
                iter_num = x

            _update_progress_bar(iter_num)

            result = func(carry, x)

            return close_progress_bar(result, iter_num)

        return wrapper_with_progress

    return _scan_progress_decorator
