"""Tests for miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
import pytest
from chipvm import execute, MemoryAccessError, FONT_START


class TestTimers:
    """Test timer-related instructions."""

    def test_misc_timer_instructions(self, fresh_state):
        """FX15, FX18 and FX07."""
        state = execute(fresh_state, 0x6030)  # V0 = 48
        state = execute(state, 0xF015)  # Set delay timer to V0
        assert state.delay_timer == 48

        state = execute(state, 0x6120)  # V1 = 32
        state = execute(state, 0xF118)  # Set sound timer to V1
        assert state.sound_timer == 32

        state = execute(state, 0xF207)  # V2 = delay timer
        assert state.V[2] == 48


class TestIndexArithmetic:
    """Test FX1E."""

    def test_add_to_index(self, fresh_state):
        state = execute(fresh_state, 0xA300)
        state = execute(state, 0x6010)
        state = execute(state, 0xF01E)
        assert state.I == 0x310

    def test_add_to_index_leaves_vf(self, fresh_state):
        """FX1E - VF is not used as an overflow flag."""
        state = execute(fresh_state, 0xAFFF)
        state = execute(state, 0x60FF)
        state = execute(state, 0x6F07)
        state = execute(state, 0xF01E)
        assert state.I == 0x10FE
        assert state.V[15] == 0x07


class TestBCD:
    """Test BCD conversion."""

    @pytest.mark.parametrize("value, digits", [
        (0, (0, 0, 0)),
        (7, (0, 0, 7)),
        (42, (0, 4, 2)),
        (156, (1, 5, 6)),
        (255, (2, 5, 5)),
    ])
    def test_bcd_conversion(self, fresh_state, value, digits):
        """FX33 - Hundreds, tens and ones at I, I+1, I+2."""
        state = execute(fresh_state, 0x6000 | value)
        state = execute(state, 0xA300)
        state = execute(state, 0xF033)

        assert tuple(int(d) for d in state.memory[0x300:0x303]) == digits
        assert state.I == 0x300

    def test_bcd_past_memory_end(self, fresh_state):
        """FX33 - Writing beyond 0xFFF is fatal."""
        state = execute(fresh_state, 0xAFFE)
        with pytest.raises(MemoryAccessError):
            execute(state, 0xF033)


class TestFont:
    """Test font character addressing."""

    def test_font_all_characters(self, fresh_state):
        """FX29 - I points at the glyph for every hex digit."""
        state = fresh_state
        for digit in range(16):
            state = execute(state, 0x6000 | digit)
            state = execute(state, 0xF029)

            expected = FONT_START + digit * 5
            assert state.I == expected, f"Font address wrong for digit {digit:X}"

    def test_font_uses_low_nibble(self, fresh_state):
        state = execute(fresh_state, 0x601A)
        state = execute(state, 0xF029)
        assert state.I == FONT_START + 0xA * 5


class TestMemoryOperations:
    """Test store/load register operations."""

    def test_store_load(self, fresh_state):
        """FX55/FX65 - Round trip V0-V2, I unchanged."""
        state = execute(fresh_state, 0x6001)
        state = execute(state, 0x6102)
        state = execute(state, 0x6203)
        state = execute(state, 0x6304)  # Not part of the block
        state = execute(state, 0xA300)

        state = execute(state, 0xF255)
        assert state.I == 0x300
        assert [int(b) for b in state.memory[0x300:0x304]] == [1, 2, 3, 0]

        state = state.replace(V=jnp.zeros_like(state.V))
        state = execute(state, 0xF265)
        assert [int(v) for v in state.V[:4]] == [1, 2, 3, 0]
        assert state.I == 0x300

    def test_store_all_registers(self, fresh_state):
        """FX55 with X=F stores all 16 registers."""
        state = fresh_state.replace(V=jnp.arange(16, dtype=jnp.uint8))
        state = execute(state, 0xA400)
        state = execute(state, 0xFF55)
        assert [int(b) for b in state.memory[0x400:0x410]] == list(range(16))

    def test_store_load_legacy_mode(self, legacy_state):
        """Legacy mode leaves I past the block."""
        state = execute(legacy_state, 0x6001)
        state = execute(state, 0x6102)
        state = execute(state, 0xA400)

        state = execute(state, 0xF155)
        assert state.I == 0x400 + 2

        state = execute(state, 0xA400)
        state = execute(state, 0x6000)
        state = execute(state, 0x6100)
        state = execute(state, 0xF165)
        assert state.V[0] == 1
        assert state.V[1] == 2
        assert state.I == 0x400 + 2

    def test_load_past_memory_end(self, fresh_state):
        """FX65 - Reading beyond 0xFFF is fatal."""
        state = execute(fresh_state, 0xAFFC)
        with pytest.raises(MemoryAccessError):
            execute(state, 0xF565)


class TestWaitForKey:
    """Test FX0A at the state level."""

    def test_wait_rewinds_pc(self, fresh_state):
        """No key: PC rewinds and the wait is recorded."""
        initial_pc = fresh_state.pc

        state = execute(fresh_state, 0xF00A)

        assert state.pc == initial_pc - 2
        assert state.waiting_for_key

    def test_held_key_does_not_count(self, fresh_state):
        """A key already down when the wait starts is not a press."""
        state = fresh_state.replace(keypad=fresh_state.keypad.at[7].set(True))

        state = execute(state, 0xF00A)

        assert state.waiting_for_key

    def test_new_press_ends_wait(self, fresh_state):
        """A key going down during the wait is stored in VX."""
        state = execute(fresh_state, 0xF30A)
        state = state.replace(pc=state.pc + 2)  # fetch advance
        state = state.replace(keypad=state.keypad.at[0xB].set(True))

        state = execute(state, 0xF30A)

        assert not state.waiting_for_key
        assert state.V[3] == 0xB
        assert state.pc == fresh_state.pc

    def test_release_and_press_ends_wait(self, fresh_state):
        """A held key counts once it is released and pressed again."""
        state = fresh_state.replace(keypad=fresh_state.keypad.at[4].set(True))
        state = execute(state, 0xF00A)

        state = state.replace(keypad=state.keypad.at[4].set(False))
        state = execute(state, 0xF00A)
        assert state.waiting_for_key

        state = state.replace(keypad=state.keypad.at[4].set(True))
        state = execute(state, 0xF00A)
        assert not state.waiting_for_key
        assert state.V[0] == 4
