"""Main CHIP-8 emulator execution engine."""

from typing import Callable, Union

import jax.numpy as jnp
from chipvm.state import EmulatorState, StackState, read_memory
from chipvm.decode import DecodedInstruction, Op, SUPER_CHIP_OPS, decode
from chipvm.constants import INSTRUCTION_SIZE, MAX_ROM_SIZE, PROGRAM_START
from chipvm.errors import CapacityError
from chipvm.instructions.system import (
    execute_clear_screen, execute_return, execute_sys, execute_unknown, execute_unsupported
)
from chipvm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key_pressed, execute_skip_if_key_not_pressed
)
from chipvm.instructions.alu import (
    execute_alu_set, execute_alu_or, execute_alu_and, execute_alu_xor, execute_alu_add,
    execute_alu_sub_xy, execute_alu_shift_right, execute_alu_sub_yx, execute_alu_shift_left
)
from chipvm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipvm.instructions.display import execute_display
from chipvm.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)

Handler = Callable[[EmulatorState, DecodedInstruction], EmulatorState]

HANDLERS: dict[Op, Handler] = {
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.SYS: execute_sys,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_IMM: execute_skip_if_equal_immediate,
    Op.SNE_IMM: execute_skip_if_not_equal_immediate,
    Op.SE_REG: execute_skip_if_equal_register,
    Op.LD_IMM: execute_set,
    Op.ADD_IMM: execute_add,
    Op.LD_REG: execute_alu_set,
    Op.OR: execute_alu_or,
    Op.AND: execute_alu_and,
    Op.XOR: execute_alu_xor,
    Op.ADD_REG: execute_alu_add,
    Op.SUB: execute_alu_sub_xy,
    Op.SHR: execute_alu_shift_right,
    Op.SUBN: execute_alu_sub_yx,
    Op.SHL: execute_alu_shift_left,
    Op.SNE_REG: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_V0: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key_pressed,
    Op.SKNP: execute_skip_if_key_not_pressed,
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_VX_K: execute_wait_for_key,
    Op.LD_DT_VX: execute_set_delay_timer,
    Op.LD_ST_VX: execute_set_sound_timer,
    Op.ADD_I: execute_add_to_index,
    Op.LD_F: execute_font_character,
    Op.LD_B: execute_bcd_conversion,
    Op.LD_MEM_VX: execute_store_registers,
    Op.LD_VX_MEM: execute_load_registers,
    Op.UNKNOWN: execute_unknown,
    **{op: execute_unsupported for op in SUPER_CHIP_OPS},
}

_missing = set(Op) - set(HANDLERS)
if _missing:
    raise RuntimeError(f"No handler for {sorted(op.name for op in _missing)}")


def execute_decoded(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Apply an already decoded instruction."""
    return HANDLERS[instruction.op](state, instruction)


def execute(state: EmulatorState, instruction: Union[int, DecodedInstruction]) -> EmulatorState:
    """Execute single CHIP-8 instruction."""
    if not isinstance(instruction, DecodedInstruction):
        instruction = decode(instruction)
    return execute_decoded(state, instruction)


def _pack_u16(high: int, low: int) -> int:
    """Pack two bytes into uint16."""
    return (int(high) << 8) | int(low)


def fetch(state: EmulatorState) -> tuple[EmulatorState, int]:
    """Fetch next big-endian instruction word and advance PC."""
    pc = int(state.pc)
    high, low = read_memory(state, pc, INSTRUCTION_SIZE)
    instruction = _pack_u16(high, low)
    return state.replace(pc=jnp.astype(pc + INSTRUCTION_SIZE, jnp.uint16)), instruction


def load_rom(state: EmulatorState, rom_data: bytes) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    rom_data = bytes(rom_data)
    if len(rom_data) > MAX_ROM_SIZE:
        raise CapacityError(len(rom_data), MAX_ROM_SIZE)
    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(
        memory=new_memory,
        pc=jnp.astype(PROGRAM_START, jnp.uint16),
        stack=StackState(),
        waiting_for_key=False,
        key_snapshot=jnp.zeros_like(state.keypad),
    )
