"""Tests for ALU operations (8xxx)."""

import pytest
from chipvm import execute


class TestBasicALU:
    """Test basic ALU operations."""

    def test_alu_set_basic(self, fresh_state):
        """8XY0 - Set VX = VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x42))
        state = state.replace(V=state.V.at[2].set(0x99))

        state = execute(state, 0x8120)  # V1 = V2

        assert state.V[1] == 0x99
        assert state.V[2] == 0x99

    def test_alu_or_basic(self, fresh_state):
        """8XY1 - OR operation."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0xF0))
        state = state.replace(V=state.V.at[2].set(0x0F))

        state = execute(state, 0x8121)  # V1 |= V2

        assert state.V[1] == 0xFF

    def test_alu_and_basic(self, fresh_state):
        """8XY2 - AND operation."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0xF0))
        state = state.replace(V=state.V.at[2].set(0xF1))

        state = execute(state, 0x8122)  # V1 &= V2

        assert state.V[1] == 0xF0

    def test_alu_xor_same(self, fresh_state):
        """8XY3 - XOR with same value should be 0."""
        state = fresh_state
        state = state.replace(V=state.V.at[3].set(0xAA))
        state = state.replace(V=state.V.at[4].set(0xAA))

        state = execute(state, 0x8343)  # V3 ^= V4

        assert state.V[3] == 0x00

    def test_logic_leaves_vf(self, fresh_state):
        """Logical operations do not touch VF by default."""
        state = fresh_state.replace(V=fresh_state.V.at[15].set(0x07))

        for opcode in (0x8121, 0x8122, 0x8123):
            state = execute(state, opcode)
            assert state.V[15] == 0x07

    def test_logic_resets_vf_legacy(self, legacy_state):
        """Legacy mode clears VF after OR/AND/XOR."""
        state = legacy_state.replace(V=legacy_state.V.at[15].set(0x07))

        state = execute(state, 0x8121)

        assert state.V[15] == 0


class TestALUArithmetic:
    """Test arithmetic ALU operations."""

    def test_alu_add_no_carry(self, fresh_state):
        """8XY4 - Add without carry."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x01))
        state = state.replace(V=state.V.at[2].set(0x01))

        state = execute(state, 0x8124)  # V1 += V2

        assert state.V[1] == 0x02
        assert state.V[15] == 0

    def test_alu_add_with_carry(self, fresh_state):
        """8XY4 - Add with carry."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0xFF))
        state = state.replace(V=state.V.at[2].set(0x01))

        state = execute(state, 0x8124)  # V1 += V2

        assert state.V[1] == 0x00  # 256 wraps to 0
        assert state.V[15] == 1  # Carry set

    def test_alu_add_max(self, fresh_state):
        """8XY4 - 0xFF + 0xFF keeps the low byte."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0xFF))
        state = state.replace(V=state.V.at[2].set(0xFF))

        state = execute(state, 0x8124)

        assert state.V[1] == 0xFE
        assert state.V[15] == 1

    def test_alu_sub_xy_no_borrow(self, fresh_state):
        """8XY5 - Subtract VX - VY, no borrow."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x0A))
        state = state.replace(V=state.V.at[2].set(0x05))

        state = execute(state, 0x8125)  # V1 -= V2

        assert state.V[1] == 0x05
        assert state.V[15] == 1  # No borrow (VX >= VY)

    def test_alu_sub_xy_with_borrow(self, fresh_state):
        """8XY5 - Subtract VX - VY, with borrow."""
        state = fresh_state
        state = state.replace(V=state.V.at[3].set(0x05))
        state = state.replace(V=state.V.at[4].set(0x0A))

        state = execute(state, 0x8345)  # V3 -= V4

        assert state.V[3] == 0xFB  # 5 - 10 = -5 → 251
        assert state.V[15] == 0  # Borrow (VX < VY)

    def test_alu_sub_equal(self, fresh_state):
        """8XY5 - Equal operands give zero and no borrow."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x33))
        state = state.replace(V=state.V.at[2].set(0x33))

        state = execute(state, 0x8125)

        assert state.V[1] == 0
        assert state.V[15] == 1

    def test_alu_sub_yx_no_borrow(self, fresh_state):
        """8XY7 - Subtract VY - VX, no borrow."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x10))
        state = state.replace(V=state.V.at[2].set(0x30))

        state = execute(state, 0x8127)  # V1 = V2 - V1

        assert state.V[1] == 0x20  # 48 - 16 = 32
        assert state.V[15] == 1  # No borrow (VY >= VX)

    def test_alu_sub_yx_with_borrow(self, fresh_state):
        """8XY7 - Subtract VY - VX, with borrow."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x30))
        state = state.replace(V=state.V.at[2].set(0x10))

        state = execute(state, 0x8127)

        assert state.V[1] == 0xE0
        assert state.V[15] == 0


class TestALUShifts:
    """Test shift operations with quirk differences."""

    def test_shift_right_odd(self, fresh_state):
        """8XY6 - Shift right, LSB goes to VF."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x03))
        state = state.replace(V=state.V.at[4].set(0xFF))  # Should be ignored

        state = execute(state, 0x8346)  # V3 >>= 1

        assert state.V[3] == 0x01
        assert state.V[15] == 1  # LSB was 1

    def test_shift_right_even(self, fresh_state):
        """8XY6 - Shift right, even number."""
        state = fresh_state.replace(V=fresh_state.V.at[1].set(0x04))

        state = execute(state, 0x8126)

        assert state.V[1] == 0x02
        assert state.V[15] == 0

    def test_shift_left_overflow(self, fresh_state):
        """8XYE - Shift left, MSB goes to VF."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x81))  # 10000001

        state = execute(state, 0x834E)  # V3 <<= 1

        assert state.V[3] == 0x02  # 129 << 1 = 258 → 2
        assert state.V[15] == 1  # MSB was 1

    def test_shift_left_no_overflow(self, fresh_state):
        """8XYE - Shift left with clear MSB."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x41))

        state = execute(state, 0x834E)

        assert state.V[3] == 0x82
        assert state.V[15] == 0

    def test_shift_right_legacy(self, legacy_state):
        """8XY6 - Shift right, legacy mode shifts VY into VX."""
        state = legacy_state.replace(V=legacy_state.V.at[5].set(0x08))  # Should be ignored
        state = state.replace(V=state.V.at[6].set(0x03))  # 00000011

        state = execute(state, 0x8566)  # V5 = V6 >> 1

        assert state.V[5] == 0x01
        assert state.V[15] == 1


class TestALUEdgeCases:
    """Test edge cases with the flag register."""

    def test_alu_self_operations(self, fresh_state):
        """Operations where VX and VY are the same register."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(0xAA))

        state = execute(state, 0x8553)
        assert state.V[5] == 0x00, "Self XOR should result in 0"

        state = state.replace(V=state.V.at[5].set(0x80))
        state = execute(state, 0x8554)  # V5 += V5
        assert state.V[5] == 0x00, "Self ADD should wrap on overflow"
        assert state.V[15] == 1, "Self ADD should set carry flag"

    def test_vf_as_source(self, fresh_state):
        """VF is read before it is overwritten by the flag."""
        state = fresh_state
        state = state.replace(V=state.V.at[15].set(0x42))
        state = state.replace(V=state.V.at[1].set(0x10))

        state = execute(state, 0x81F4)  # V1 += VF
        assert state.V[1] == 0x52
        assert state.V[15] == 0

    def test_vf_as_destination(self, fresh_state):
        """When X is F the flag wins over the result."""
        state = fresh_state
        state = state.replace(V=state.V.at[15].set(0xFF))
        state = state.replace(V=state.V.at[1].set(0x01))

        state = execute(state, 0x8F14)  # VF += V1

        assert state.V[15] == 1
