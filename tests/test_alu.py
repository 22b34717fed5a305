"""Tests for ALU operations (8xxx)."""

import pytest
from chip8vm import Quirks, create_state, execute
from conftest import set_registers


class TestBasicALU:
    """Test basic ALU operations."""

    def test_alu_set_basic(self, fresh_state):
        """8XY0 - Set VX = VY, VF untouched."""
        state = set_registers(fresh_state, V1=0x42, V2=0x99, VF=0x07)

        state = execute(state, 0x8120)  # V1 = V2

        assert state.V[1] == 0x99
        assert state.V[2] == 0x99
        assert state.V[15] == 0x07

    def test_alu_or_basic(self, fresh_state):
        """8XY1 - OR operation."""
        state = set_registers(fresh_state, V1=0xF0, V2=0x0F, VF=0x05)

        state = execute(state, 0x8121)  # V1 |= V2

        assert state.V[1] == 0xFF
        assert state.V[15] == 0

    def test_alu_and_basic(self, fresh_state):
        """8XY2 - AND operation."""
        state = set_registers(fresh_state, V1=0xF0, V2=0xF1)

        state = execute(state, 0x8122)  # V1 &= V2

        assert state.V[1] == 0xF0
        assert state.V[15] == 0

    def test_alu_xor_basic(self, fresh_state):
        """8XY3 - XOR operation."""
        state = set_registers(fresh_state, V1=0xFF, V2=0xF0)

        state = execute(state, 0x8123)  # V1 ^= V2

        assert state.V[1] == 0x0F
        assert state.V[15] == 0

    def test_logic_keeps_vf_without_reset_quirk(self, schip_state):
        """8XY1 - VF survives when logic_resets_vf is off."""
        state = set_registers(schip_state, V1=0xF0, V2=0x0F, VF=0x05)

        state = execute(state, 0x8121)

        assert state.V[1] == 0xFF
        assert state.V[15] == 0x05


class TestALUArithmetic:
    """Test arithmetic ALU operations."""

    def test_alu_add_no_carry(self, fresh_state):
        """8XY4 - Add without carry."""
        state = set_registers(fresh_state, V1=0x10, V2=0x20)

        state = execute(state, 0x8124)  # V1 += V2

        assert state.V[1] == 0x30
        assert state.V[15] == 0

    def test_alu_add_with_carry(self, fresh_state):
        """8XY4 - 0xFF + 0x01 wraps to 0 with carry."""
        state = set_registers(fresh_state, V1=0xFF, V2=0x01)

        state = execute(state, 0x8124)  # V1 += V2

        assert state.V[1] == 0x00
        assert state.V[15] == 1

    def test_alu_sub_xy_no_borrow(self, fresh_state):
        """8XY5 - Subtract VX - VY, no borrow."""
        state = set_registers(fresh_state, V1=0x30, V2=0x10)

        state = execute(state, 0x8125)  # V1 -= V2

        assert state.V[1] == 0x20
        assert state.V[15] == 1

    def test_alu_sub_xy_with_borrow(self, fresh_state):
        """8XY5 - 0x00 - 0x01 wraps to 0xFF with borrow."""
        state = set_registers(fresh_state, V1=0x00, V2=0x01)

        state = execute(state, 0x8125)  # V1 -= V2

        assert state.V[1] == 0xFF
        assert state.V[15] == 0

    def test_alu_sub_equal_values(self, fresh_state):
        """8XY5 - Equal operands do not borrow."""
        state = set_registers(fresh_state, V3=0x42, V4=0x42)

        state = execute(state, 0x8345)

        assert state.V[3] == 0
        assert state.V[15] == 1

    def test_alu_sub_yx_no_borrow(self, fresh_state):
        """8XY7 - Subtract VY - VX, no borrow."""
        state = set_registers(fresh_state, V1=0x10, V2=0x30)

        state = execute(state, 0x8127)  # V1 = V2 - V1

        assert state.V[1] == 0x20
        assert state.V[15] == 1

    def test_alu_sub_yx_with_borrow(self, fresh_state):
        """8XY7 - Subtract VY - VX, with borrow."""
        state = set_registers(fresh_state, V1=0x30, V2=0x10)

        state = execute(state, 0x8127)

        assert state.V[1] == 0xE0
        assert state.V[15] == 0


class TestALUShifts:
    """Test shift operations under both shift quirks."""

    def test_shift_right_in_place(self, fresh_state):
        """8XY6 - Shift VX right, VY ignored."""
        state = set_registers(fresh_state, V3=0x05, V4=0xFF)

        state = execute(state, 0x8346)  # V3 >>= 1

        assert state.V[3] == 0x02
        assert state.V[15] == 1

    def test_shift_right_from_vy(self, cosmac_state):
        """8XY6 - Shift VY right into VX."""
        state = set_registers(cosmac_state, V5=0x08, V6=0x03)

        state = execute(state, 0x8566)  # V5 = V6 >> 1

        assert state.V[5] == 0x01
        assert state.V[15] == 1

    def test_shift_left_overflow(self, fresh_state):
        """8XYE - Shift left, MSB goes to VF."""
        state = set_registers(fresh_state, V3=0x81, V4=0xFF)

        state = execute(state, 0x834E)  # V3 <<= 1

        assert state.V[3] == 0x02
        assert state.V[15] == 1

    def test_shift_left_from_vy(self, cosmac_state):
        """8XYE - Shift VY left into VX."""
        state = set_registers(cosmac_state, V1=0xFF, V2=0x41)

        state = execute(state, 0x812E)

        assert state.V[1] == 0x82
        assert state.V[15] == 0

    def test_shift_quirk_comparison(self):
        """The shift_uses_vy flag switches the shift source."""
        in_place = create_state(quirks=Quirks(shift_uses_vy=False))
        from_vy = create_state(quirks=Quirks(shift_uses_vy=True))

        in_place = execute(set_registers(in_place, V1=0x08, V2=0x03), 0x8126)
        from_vy = execute(set_registers(from_vy, V1=0x08, V2=0x03), 0x8126)

        assert in_place.V[1] == 0x04
        assert from_vy.V[1] == 0x01


class TestALUEdgeCases:
    """Test edge cases and comprehensive scenarios."""

    @pytest.mark.parametrize("op", [0x8, 0x9, 0xA, 0xB, 0xC, 0xD, 0xF])
    def test_alu_undefined_operations_halt(self, fresh_state, op):
        """8XY8-8XYD and 8XYF are illegal and leave registers untouched."""
        state = set_registers(fresh_state, V1=0x42, V2=0x99)

        state = execute(state, 0x8120 | op)

        assert int(state.fault) != 0
        assert int(state.fault_info) == 0x8120 | op
        assert state.V[1] == 0x42

    def test_alu_self_operations(self, fresh_state):
        """Test operations where VX and VY are the same register."""
        state = set_registers(fresh_state, V5=0xAA)

        state = execute(state, 0x8553)
        assert state.V[5] == 0x00, "Self XOR should result in 0"

        state = set_registers(state, V5=0x80)
        state = execute(state, 0x8554)  # V5 += V5
        assert state.V[5] == 0x00, "Self ADD should wrap on overflow"
        assert state.V[15] == 1, "Self ADD should set carry flag"

    def test_vf_as_source(self, fresh_state):
        """VF as operand is read before the flag is written."""
        state = set_registers(fresh_state, VF=0x42, V1=0x10)

        state = execute(state, 0x81F4)  # V1 += VF
        assert state.V[1] == 0x52
        assert state.V[15] == 0

    def test_vf_as_destination_keeps_flag(self, fresh_state):
        """With VF as destination the flag overwrites the result."""
        state = set_registers(fresh_state, VF=0xFF, V1=0x01)

        state = execute(state, 0x8F14)  # VF += V1

        assert state.V[15] == 1
