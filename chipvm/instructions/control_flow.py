"""CHIP-8 control flow instructions."""

import jax.numpy as jnp
from chipvm.constants import INSTRUCTION_SIZE
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.stack import push


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    state = state.replace(stack=push(state.stack, state.pc))
    return execute_jump(state, instruction)


def skip_next(state: EmulatorState) -> EmulatorState:
    """Advance PC over the following instruction."""
    return state.replace(pc=jnp.astype(int(state.pc) + INSTRUCTION_SIZE, jnp.uint16))


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        if condition_fn(state, instruction):
            return skip_next(state)
        return state
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == int(state.V[inst.y])
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != int(state.V[inst.y])
)

execute_skip_if_key_pressed = make_skip_instruction(
    lambda state, inst: bool(state.keypad[int(state.V[inst.x]) & 0xF])
)

execute_skip_if_key_not_pressed = make_skip_instruction(
    lambda state, inst: not bool(state.keypad[int(state.V[inst.x]) & 0xF])
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0 (BXNN - NN + VX with ``jump_uses_vx``)."""
    if state.config.jump_uses_vx:
        jump_address = instruction.nn + int(state.V[instruction.x])
    else:
        jump_address = instruction.nnn + int(state.V[0])
    return state.replace(pc=jnp.astype(jump_address, jnp.uint16))
