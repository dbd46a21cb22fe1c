"""
MVP CPU Package
===============

This package contains the W65C816 instruction encoding tables. The
grammar never consults them: it accepts any mnemonic with any operand
shape, and a later stage uses these tables to decide whether the
combination exists and which opcode byte it encodes to.

Modules:
    w65c816: Addressing modes, the opcode table and lookup functions.

Usage:
    from mvp.cpu import AddressingMode, get_opcode

    get_opcode("ADC", AddressingMode.IMMEDIATE)  # 0x69
"""

# =============================================================================
# Public API Exports
# =============================================================================

from mvp.cpu.w65c816 import (
    # Core types
    AddressingMode,
    # Opcode table
    OPCODE_TABLE,
    ACCUMULATOR_GROUP_BASES,
    ACCUMULATOR_GROUP_OFFSETS,
    # Instruction set reference lists
    MNEMONICS,
    NO_IMMEDIATE_INSTRUCTIONS,
    # Lookup functions
    get_opcode,
    get_valid_modes,
    is_valid_instruction,
)

__all__ = [
    "AddressingMode",
    "OPCODE_TABLE",
    "ACCUMULATOR_GROUP_BASES",
    "ACCUMULATOR_GROUP_OFFSETS",
    "MNEMONICS",
    "NO_IMMEDIATE_INSTRUCTIONS",
    "get_opcode",
    "get_valid_modes",
    "is_valid_instruction",
]
