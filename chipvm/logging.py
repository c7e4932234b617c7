"""Console logging for chipvm.

``TraceLogger`` reports machine lifecycle events (load, halt, skipped
opcodes, run summaries) and, at DEBUG level, one line per executed
instruction. Bounded runs can show a tqdm progress bar.
"""

import time
import sys
from typing import Optional

from tqdm import tqdm

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

_LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
}
_RESET = "\033[0m"


class ConsoleLogger:
    """Levelled console logger writing ``[time][LEVEL][name] message`` lines.

    Colours are only used when stdout is a terminal.
    """

    def __init__(
        self,
        name: str = "chipvm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        log_level = log_level.upper()
        if log_level not in LEVELS and log_level != "CRITICAL":
            raise ValueError(f"Unknown log level {log_level!r}, expected one of {LEVELS}")
        self.name = name
        self.log_level = log_level
        self.use_colors = use_colors and sys.stdout.isatty()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def _should_log(self, level: str) -> bool:
        # CRITICAL silences everything
        if self.log_level == "CRITICAL":
            return False
        return LEVELS.index(level) >= LEVELS.index(self.log_level)

    def _emit(self, level: str, message: str):
        if not self._should_log(level):
            return
        prefix = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        tag = f"[{level:>8s}]"
        if self.use_colors:
            tag = f"{_LEVEL_COLORS[level]}{tag}{_RESET}"
        print(f"{prefix}{tag}[{self.name}] {message}", flush=True)

    def debug(self, message: str):
        self._emit("DEBUG", message)

    def info(self, message: str):
        self._emit("INFO", message)

    def warning(self, message: str):
        self._emit("WARNING", message)

    def error(self, message: str):
        self._emit("ERROR", message)


class TraceLogger(ConsoleLogger):
    """Logger for machine lifecycle events and per-instruction traces.

    Defaults to WARNING, so tracing is off unless ``log_level="DEBUG"``.
    """

    def __init__(self, name: str = "Machine", **kwargs):
        kwargs.setdefault("log_level", "WARNING")
        super().__init__(name, **kwargs)
        self._tracing = self._should_log("DEBUG")

    def log_load(self, rom_size: int, capacity: int):
        self.info(f"Loaded ROM: {rom_size} bytes ({capacity - rom_size} bytes free)")

    def log_step(self, cycle: int, pc: int, opcode: int, mnemonic: str):
        """Log one executed instruction as ``#cycle PC: OPCODE  MNEMONIC``."""
        # Skip formatting on the hot path
        if self._tracing:
            self.debug(f"#{cycle:<6d} {pc:03X}: {opcode:04X}  {mnemonic}")

    def log_skipped(self, pc: int, opcode: int, mnemonic: str):
        self.warning(f"Skipping {mnemonic} 0x{opcode:04X} at 0x{pc:03X}")

    def log_halt(self, cycle: int, pc: int, error: Exception):
        self.error(f"Halted at cycle {cycle}, PC=0x{pc:03X}: {error}")

    def log_run_summary(self, executed: int, max_cycles: int, elapsed: float, reason: str):
        rate = executed / elapsed if elapsed > 0 else 0.0
        self.info(
            f"Run finished ({reason}): {executed}/{max_cycles} cycles "
            f"in {elapsed:.3f}s ({rate:,.0f} cycles/s)"
        )


def build_tqdm_progress_bar(n: int, desc: Optional[str] = None, **kwargs) -> tqdm:
    """Build a tqdm progress bar for a run of at most ``n`` cycles."""
    if desc is None:
        desc = f"Running ({n:,} cycles)"

    for kwarg in ("total", "unit"):
        kwargs.pop(kwarg, None)

    return tqdm(total=n, desc=desc, unit="cycle", **kwargs)
