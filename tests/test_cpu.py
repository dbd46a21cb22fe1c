# =============================================================================
# test_cpu.py - W65C816 Opcode Table Tests
# =============================================================================
# Tests for the opcode lookup used by the encoding stage.
#
# Test coverage includes:
#   - Opcodes of every addressing mode of ADC
#   - The accumulator group pattern (base + mode offset)
#   - STA's missing immediate form
#   - Case-insensitive lookup and unknown mnemonics
# =============================================================================

import pytest
from mvp.cpu import (
    MNEMONICS,
    OPCODE_TABLE,
    AddressingMode,
    get_opcode,
    get_valid_modes,
    is_valid_instruction,
)


# =============================================================================
# ADC Encoding Tests
# =============================================================================

class TestAdc:
    """Test every ADC encoding against the W65C816S opcode matrix."""

    @pytest.mark.parametrize("mode,expected", [
        (AddressingMode.DIRECT_PAGE, 0x65),
        (AddressingMode.ABSOLUTE, 0x6D),
        (AddressingMode.ABSOLUTE_LONG, 0x6F),
        (AddressingMode.IMMEDIATE, 0x69),
        (AddressingMode.DP_INDEXED_X, 0x75),
        (AddressingMode.ABSOLUTE_INDEXED_X, 0x7D),
        (AddressingMode.ABSOLUTE_INDEXED_Y, 0x79),
        (AddressingMode.ABSOLUTE_LONG_INDEXED_X, 0x7F),
        (AddressingMode.DP_INDIRECT, 0x72),
        (AddressingMode.DP_INDEXED_INDIRECT_X, 0x61),
        (AddressingMode.DP_INDIRECT_INDEXED_Y, 0x71),
        (AddressingMode.DP_INDIRECT_LONG, 0x67),
        (AddressingMode.DP_INDIRECT_LONG_INDEXED_Y, 0x77),
        (AddressingMode.STACK_RELATIVE, 0x63),
        (AddressingMode.SR_INDIRECT_INDEXED_Y, 0x73),
    ])
    def test_adc(self, mode, expected):
        assert get_opcode("ADC", mode) == expected

    def test_adc_has_no_implied_form(self):
        assert get_opcode("ADC", AddressingMode.IMPLIED) is None


# =============================================================================
# Accumulator Group Tests
# =============================================================================

class TestAccumulatorGroup:
    """Test the other accumulator-group instructions."""

    @pytest.mark.parametrize("mnemonic,mode,expected", [
        ("ORA", AddressingMode.IMMEDIATE, 0x09),
        ("AND", AddressingMode.ABSOLUTE, 0x2D),
        ("EOR", AddressingMode.DIRECT_PAGE, 0x45),
        ("STA", AddressingMode.ABSOLUTE, 0x8D),
        ("STA", AddressingMode.DP_INDIRECT, 0x92),
        ("LDA", AddressingMode.IMMEDIATE, 0xA9),
        ("LDA", AddressingMode.DP_INDIRECT_INDEXED_Y, 0xB1),
        ("LDA", AddressingMode.ABSOLUTE_LONG_INDEXED_X, 0xBF),
        ("CMP", AddressingMode.ABSOLUTE_INDEXED_Y, 0xD9),
        ("SBC", AddressingMode.STACK_RELATIVE, 0xE3),
    ])
    def test_opcode(self, mnemonic, mode, expected):
        assert get_opcode(mnemonic, mode) == expected

    def test_sta_has_no_immediate(self):
        assert get_opcode("STA", AddressingMode.IMMEDIATE) is None
        assert AddressingMode.IMMEDIATE not in get_valid_modes("STA")
        assert len(get_valid_modes("STA")) == 14

    def test_lda_modes(self):
        assert len(get_valid_modes("LDA")) == 15

    def test_opcodes_are_unique(self):
        assert len(set(OPCODE_TABLE.values())) == len(OPCODE_TABLE)

    def test_mnemonics(self):
        assert MNEMONICS == {"ORA", "AND", "EOR", "ADC", "STA", "LDA", "CMP", "SBC"}


# =============================================================================
# Lookup Tests
# =============================================================================

class TestLookup:
    """Test lookup behaviour."""

    def test_case_insensitive(self):
        assert get_opcode("adc", AddressingMode.IMMEDIATE) == 0x69
        assert is_valid_instruction("lda")

    def test_unknown_mnemonic(self):
        assert get_opcode("NOP", AddressingMode.IMPLIED) is None
        assert get_valid_modes("NOP") == []
        assert not is_valid_instruction("NOP")

    def test_mode_syntax(self):
        assert str(AddressingMode.STACK_RELATIVE) == "sr,s"
        assert str(AddressingMode.SR_INDIRECT_INDEXED_Y) == "(sr,s),y"
