"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chipvm.state import EmulatorState, read_memory, set_register, write_memory
from chipvm.decode import DecodedInstruction
from chipvm.constants import FONT_START, FONT_GLYPH_SIZE, INSTRUCTION_SIZE, WORD_MASK


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return set_register(state, instruction.x, int(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register, VF untouched."""
    new_i = (int(state.I) + int(state.V[instruction.x])) & WORD_MASK
    return state.replace(I=jnp.astype(new_i, jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for a key press transition, store the key in VX.

    The keypad is snapshotted when the wait starts. The wait ends on the first
    key that is down now but was up in the snapshot. Until then PC is wound
    back so the instruction executes again on the next step.
    """
    if not state.waiting_for_key:
        snapshot = state.keypad
    else:
        # Released keys leave the snapshot so pressing them again counts
        snapshot = state.key_snapshot & state.keypad

    new_presses = state.keypad & ~snapshot
    if bool(jnp.any(new_presses)):
        pressed_key = int(jnp.argmax(new_presses))
        state = set_register(state, instruction.x, pressed_key)
        return state.replace(waiting_for_key=False, key_snapshot=jnp.zeros_like(state.keypad))

    return state.replace(
        pc=jnp.astype(int(state.pc) - INSTRUCTION_SIZE, jnp.uint16),
        waiting_for_key=True,
        key_snapshot=snapshot,
    )


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + (int(state.V[instruction.x]) & 0xF) * FONT_GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = int(state.V[instruction.x])
    digits = [value // 100, (value // 10) % 10, value % 10]
    return write_memory(state, state.I, digits)


def _advance_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    if state.config.load_store_increments_i:
        return state.replace(I=jnp.astype((int(state.I) + instruction.x + 1) & WORD_MASK, jnp.uint16))
    return state


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    state = write_memory(state, state.I, state.V[:instruction.x + 1])
    return _advance_index(state, instruction)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    values = read_memory(state, state.I, instruction.x + 1)
    state = state.replace(V=state.V.at[:instruction.x + 1].set(values))
    return _advance_index(state, instruction)
