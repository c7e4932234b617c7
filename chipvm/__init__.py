"""CHIP-8 virtual machine package."""

from chipvm.state import EmulatorState, create_state
from chipvm.emulator import execute, execute_decoded, load_rom, fetch
from chipvm.decode import DecodedInstruction, Op, decode
from chipvm.config import MachineConfig, UnknownOpcodePolicy, DEFAULT_CONFIG, LEGACY_CONFIG
from chipvm.errors import (
    Chip8Error, DecodeError, UnsupportedInstructionError, CapacityError, StackError,
    MemoryAccessError, NoProgramError, MachineHaltedError,
)
from chipvm.machine import Machine, MachineStatus, StepStatus
from chipvm.constants import *

__all__ = [
    "EmulatorState",
    "create_state",
    "fetch",
    "execute",
    "execute_decoded",
    "load_rom",
    "DecodedInstruction",
    "Op",
    "decode",
    "MachineConfig",
    "UnknownOpcodePolicy",
    "DEFAULT_CONFIG",
    "LEGACY_CONFIG",
    "Chip8Error",
    "DecodeError",
    "UnsupportedInstructionError",
    "CapacityError",
    "StackError",
    "MemoryAccessError",
    "NoProgramError",
    "MachineHaltedError",
    "Machine",
    "MachineStatus",
    "StepStatus",
    "PROGRAM_START",
    "FONT_START",
    "MEMORY_SIZE",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
