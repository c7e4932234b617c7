"""CHIP-8 machine errors."""

from typing import Optional

from chipvm.constants import MEMORY_SIZE, STACK_SIZE


class Chip8Error(Exception):
    """Base class for all machine errors."""


class DecodeError(Chip8Error):
    """Opcode matches no instruction this machine executes."""

    def __init__(self, opcode: int, message: Optional[str] = None):
        self.opcode = opcode
        super().__init__(message or f"Unknown opcode 0x{opcode:04X}")


class UnsupportedInstructionError(DecodeError):
    """Recognised extension opcode (Super-CHIP) that is not implemented."""

    def __init__(self, opcode: int, mnemonic: str):
        self.mnemonic = mnemonic
        super().__init__(opcode, f"Unsupported instruction {mnemonic} (0x{opcode:04X})")


class CapacityError(Chip8Error):
    """ROM does not fit in program memory."""

    def __init__(self, rom_size: int, capacity: int):
        self.rom_size = rom_size
        self.capacity = capacity
        super().__init__(f"ROM of {rom_size} bytes exceeds the {capacity} bytes available")


class StackError(Chip8Error):
    """Call with a full stack or return with an empty one."""

    def __init__(self, pointer: int, operation: str):
        self.pointer = pointer
        self.operation = operation
        kind = "overflow" if operation == "push" else "underflow"
        super().__init__(f"Stack {kind} on {operation} (SP={pointer}, size={STACK_SIZE})")


class MemoryAccessError(Chip8Error):
    """Access outside the 4KB address space."""

    def __init__(self, address: int, length: int = 1):
        self.address = address
        self.length = length
        super().__init__(
            f"Memory access at 0x{address:04X} (+{length}) is outside 0x000-0x{MEMORY_SIZE - 1:03X}"
        )


class NoProgramError(Chip8Error):
    """Step requested before any ROM was loaded."""


class MachineHaltedError(Chip8Error):
    """Step requested after the machine halted on an error."""
