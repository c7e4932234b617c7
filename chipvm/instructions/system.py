"""CHIP-8 system instructions (0x0xxx) and the unknown-opcode handlers."""

import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.config import UnknownOpcodePolicy
from chipvm.errors import DecodeError, UnsupportedInstructionError
from chipvm.stack import pop


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """No operation."""
    return state


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack)
    return state.replace(stack=stack, pc=address)


def execute_sys(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """0NNN - Machine code routine, ignored by modern interpreters."""
    return state


def execute_unknown(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Opcode outside the instruction set."""
    if state.config.unknown_opcode_policy is UnknownOpcodePolicy.HALT:
        raise DecodeError(instruction.raw)
    return state


def execute_unsupported(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Super-CHIP extension that this machine does not implement."""
    if state.config.unknown_opcode_policy is UnknownOpcodePolicy.HALT:
        raise UnsupportedInstructionError(instruction.raw, instruction.mnemonic)
    return state
