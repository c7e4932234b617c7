"""Stateful CHIP-8 machine: owns an emulator state and steps it."""

import enum
import time
from typing import Optional

import jax
import jax.numpy as jnp

from chipvm.config import MachineConfig, DEFAULT_CONFIG
from chipvm.constants import MAX_ROM_SIZE, NUM_KEYS
from chipvm.decode import DecodedInstruction, decode
from chipvm.emulator import execute_decoded, fetch, load_rom
from chipvm.errors import Chip8Error, MachineHaltedError, NoProgramError
from chipvm.logging import TraceLogger, build_tqdm_progress_bar
from chipvm.state import EmulatorState, create_state


class StepStatus(enum.Enum):
    """Outcome of a single ``Machine.step``."""
    EXECUTED = "executed"
    BLOCKED = "blocked"   # waiting on LD Vx, K; PC still at the wait
    SKIPPED = "skipped"   # unknown opcode ignored under UnknownOpcodePolicy.SKIP


class MachineStatus(enum.Enum):
    """Lifecycle state of a ``Machine``."""
    IDLE = "idle"         # no ROM loaded
    RUNNING = "running"
    BLOCKED = "blocked"
    HALTED = "halted"


class Machine:
    """A single CHIP-8 machine.

    The machine exclusively owns its ``EmulatorState``. Callers drive it with
    ``step`` (or ``run``) and interact with it between steps through the
    keypad, timer and display accessors. It is not meant to be shared across
    threads; calls must be serialised by the owner.

    Args:
        config: Execution configuration and compatibility switches.
        logger: Trace logger; defaults to one at WARNING level.
    """

    def __init__(self, config: MachineConfig = DEFAULT_CONFIG, logger: Optional[TraceLogger] = None):
        self.config = config
        self.logger = logger or TraceLogger()
        self.reset()

    def reset(self):
        """Restore the just-constructed state: zeroed, font loaded, no ROM."""
        self._state = create_state(jax.random.PRNGKey(self.config.seed), self.config)
        self._status = MachineStatus.IDLE
        self._cycles = 0
        self._last_error: Optional[Chip8Error] = None

    @property
    def state(self) -> EmulatorState:
        """Immutable snapshot of the full emulator state."""
        return self._state

    @property
    def status(self) -> MachineStatus:
        return self._status

    @property
    def cycles(self) -> int:
        """Number of completed ``step`` calls since the last load."""
        return self._cycles

    @property
    def last_error(self) -> Optional[Chip8Error]:
        """The error that halted the machine, if any."""
        return self._last_error

    @property
    def pc(self) -> int:
        return int(self._state.pc)

    def load(self, rom: bytes):
        """Copy a ROM image to 0x200 and point PC at it.

        Raises:
            CapacityError: If the ROM does not fit above 0x200.
        """
        self._state = load_rom(self._state, rom)
        self._status = MachineStatus.RUNNING
        self._cycles = 0
        self._last_error = None
        self.logger.log_load(len(rom), MAX_ROM_SIZE)

    def step(self) -> StepStatus:
        """Fetch, decode and execute one instruction.

        Returns ``StepStatus.BLOCKED`` while an ``LD Vx, K`` wait is pending;
        call again after the keypad changes.

        Raises:
            DecodeError: Unknown or unsupported opcode under the HALT policy.
            StackError: Call with a full stack or return with an empty one.
            MemoryAccessError: Access beyond the 4KB address space.
            NoProgramError: No ROM has been loaded.
            MachineHaltedError: A previous step raised.
        """
        if self._status is MachineStatus.IDLE:
            raise NoProgramError("Load a ROM before stepping the machine")
        if self._status is MachineStatus.HALTED:
            raise MachineHaltedError(f"Machine halted: {self._last_error}")

        pc = int(self._state.pc)
        try:
            state, opcode = fetch(self._state)
            instruction = decode(opcode)
            self.logger.log_step(self._cycles, pc, opcode, instruction.mnemonic)
            state = execute_decoded(state, instruction)
        except Chip8Error as error:
            self._status = MachineStatus.HALTED
            self._last_error = error
            self.logger.log_halt(self._cycles, pc, error)
            raise

        self._state = state
        self._cycles += 1
        return self._classify(pc, instruction)

    def _classify(self, pc: int, instruction: DecodedInstruction) -> StepStatus:
        if self._state.waiting_for_key:
            self._status = MachineStatus.BLOCKED
            return StepStatus.BLOCKED

        self._status = MachineStatus.RUNNING
        if not instruction.is_known:
            self.logger.log_skipped(pc, instruction.raw, instruction.mnemonic)
            return StepStatus.SKIPPED
        return StepStatus.EXECUTED

    def run(self, max_cycles: int, progress: bool = False) -> int:
        """Step until ``max_cycles`` steps have run or the machine blocks.

        Returns the number of steps taken. Errors propagate.
        """
        bar = build_tqdm_progress_bar(max_cycles) if progress else None
        start = time.time()
        executed = 0
        reason = "cycle limit"
        try:
            while executed < max_cycles:
                result = self.step()
                executed += 1
                if bar is not None:
                    bar.update(1)
                if result is StepStatus.BLOCKED:
                    reason = "waiting for key"
                    break
        finally:
            if bar is not None:
                bar.close()
        self.logger.log_run_summary(executed, max_cycles, time.time() - start, reason)
        return executed

    # Keypad

    @property
    def keypad(self) -> jnp.ndarray:
        """Current key states, indexed by key 0x0-0xF."""
        return self._state.keypad

    def set_key(self, key: int, pressed: bool):
        """Set the state of one key."""
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key must be in 0x0-0xF, got {key}")
        self._state = self._state.replace(keypad=self._state.keypad.at[key].set(bool(pressed)))

    def press_key(self, key: int):
        self.set_key(key, True)

    def release_key(self, key: int):
        self.set_key(key, False)

    # Display

    @property
    def display(self) -> jnp.ndarray:
        """Read-only 64x32 boolean snapshot, indexed ``[x, y]``."""
        return self._state.display

    # Timers

    @property
    def delay_timer(self) -> int:
        return int(self._state.delay_timer)

    @delay_timer.setter
    def delay_timer(self, value: int):
        self._state = self._state.replace(delay_timer=jnp.astype(_check_byte(value), jnp.uint8))

    @property
    def sound_timer(self) -> int:
        return int(self._state.sound_timer)

    @sound_timer.setter
    def sound_timer(self, value: int):
        self._state = self._state.replace(sound_timer=jnp.astype(_check_byte(value), jnp.uint8))

    def tick_timers(self):
        """Decrement both timers by one, stopping at zero. Call at 60Hz."""
        self.delay_timer = max(self.delay_timer - 1, 0)
        self.sound_timer = max(self.sound_timer - 1, 0)


def _check_byte(value: int) -> int:
    value = int(value)
    if not 0 <= value <= 0xFF:
        raise ValueError(f"Timer value must be in 0-255, got {value}")
    return value
