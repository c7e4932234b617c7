"""CHIP-8 ALU operations (8xxx).

Each operation maps ``(vx, vy)`` to ``(result, vf)``; ``vf`` is ``None`` when
the operation leaves the flag register alone.
"""

from typing import Callable, Optional

from chipvm.state import EmulatorState, set_flag, set_register
from chipvm.decode import DecodedInstruction

AluFn = Callable[[int, int], tuple[int, Optional[int]]]


def alu_set(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = vx + vy
    return result & 0xFF, int(result > 0xFF)


def alu_sub_xy(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY5 - Subtract: VX -= VY, VF = NOT borrow."""
    return (vx - vy) & 0xFF, int(vx >= vy)


def alu_shift_right(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY6 - Shift right: VX >>= 1, VF = shifted-out LSB."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY7 - Subtract: VX = VY - VX, VF = NOT borrow."""
    return (vy - vx) & 0xFF, int(vy >= vx)


def alu_shift_left(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XYE - Shift left: VX <<= 1, VF = shifted-out MSB."""
    return (vx << 1) & 0xFF, (vx & 0x80) >> 7


def make_alu_instruction(alu_fn: AluFn, is_shift: bool = False):
    """Wrap an ALU function as an instruction handler."""
    def alu_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        vx = int(state.V[instruction.x])
        vy = int(state.V[instruction.y])
        if is_shift and state.config.shift_uses_vy:
            vx = vy

        result, vf = alu_fn(vx, vy)
        if vf is None and state.config.logic_resets_vf and alu_fn is not alu_set:
            vf = 0

        # VF is written last so the flag survives when X is F
        state = set_register(state, instruction.x, result)
        if vf is not None:
            state = set_flag(state, vf)
        return state
    alu_instruction.__doc__ = alu_fn.__doc__
    return alu_instruction


execute_alu_set = make_alu_instruction(alu_set)
execute_alu_or = make_alu_instruction(alu_or)
execute_alu_and = make_alu_instruction(alu_and)
execute_alu_xor = make_alu_instruction(alu_xor)
execute_alu_add = make_alu_instruction(alu_add)
execute_alu_sub_xy = make_alu_instruction(alu_sub_xy)
execute_alu_shift_right = make_alu_instruction(alu_shift_right, is_shift=True)
execute_alu_sub_yx = make_alu_instruction(alu_sub_yx)
execute_alu_shift_left = make_alu_instruction(alu_shift_left, is_shift=True)
