"""
W65C816 Instruction Encoding
============================

This module maps an instruction mnemonic and an addressing mode to the
opcode byte the W65C816 uses for that combination. It is a lookup table
only: operands are neither sized nor emitted here.

Addressing Modes
----------------
The 65816 distinguishes sixteen operand encodings. Several of them look
the same in source (``$10`` may be direct page, absolute or long), so
picking one is left to the stage that knows operand sizes.

| Mode                        | Syntax     | Example          |
|-----------------------------|------------|------------------|
| IMPLIED                     |            | NOP              |
| DIRECT_PAGE                 | dp         | LDA $10          |
| ABSOLUTE                    | addr       | LDA $1000        |
| ABSOLUTE_LONG               | long       | LDA $7E1000      |
| IMMEDIATE                   | #const     | LDA #$10         |
| DP_INDEXED_X                | dp,x       | LDA $10,x        |
| ABSOLUTE_INDEXED_X          | addr,x     | LDA $1000,x      |
| ABSOLUTE_INDEXED_Y          | addr,y     | LDA $1000,y      |
| ABSOLUTE_LONG_INDEXED_X     | long,x     | LDA $7E1000,x    |
| DP_INDIRECT                 | (dp)       | LDA ($10)        |
| DP_INDEXED_INDIRECT_X       | (dp,x)     | LDA ($10,x)      |
| DP_INDIRECT_INDEXED_Y       | (dp),y     | LDA ($10),y      |
| DP_INDIRECT_LONG            | [dp]       | LDA [$10]        |
| DP_INDIRECT_LONG_INDEXED_Y  | [dp],y     | LDA [$10],y      |
| STACK_RELATIVE              | sr,s       | LDA $03,s        |
| SR_INDIRECT_INDEXED_Y       | (sr,s),y   | LDA ($03,s),y    |

Accumulator Group
-----------------
ORA, AND, EOR, ADC, STA, LDA, CMP and SBC share one encoding pattern:
each has a base opcode and every addressing mode adds a fixed offset to
it. STA stores to memory and has no immediate form.

Reference
---------
- WDC W65C816S Datasheet, Table 5-4 (Opcode Matrix)
"""

from enum import Enum, auto
from typing import Optional


# =============================================================================
# Addressing Mode Enumeration
# =============================================================================

class AddressingMode(Enum):
    """W65C816 operand encodings."""
    IMPLIED = auto()
    DIRECT_PAGE = auto()
    ABSOLUTE = auto()
    ABSOLUTE_LONG = auto()
    IMMEDIATE = auto()
    DP_INDEXED_X = auto()
    ABSOLUTE_INDEXED_X = auto()
    ABSOLUTE_INDEXED_Y = auto()
    ABSOLUTE_LONG_INDEXED_X = auto()
    DP_INDIRECT = auto()
    DP_INDEXED_INDIRECT_X = auto()
    DP_INDIRECT_INDEXED_Y = auto()
    DP_INDIRECT_LONG = auto()
    DP_INDIRECT_LONG_INDEXED_Y = auto()
    STACK_RELATIVE = auto()
    SR_INDIRECT_INDEXED_Y = auto()

    def __str__(self) -> str:
        """Return the operand syntax for error messages."""
        return _MODE_SYNTAX[self]


_MODE_SYNTAX = {
    AddressingMode.IMPLIED: "implied",
    AddressingMode.DIRECT_PAGE: "dp",
    AddressingMode.ABSOLUTE: "addr",
    AddressingMode.ABSOLUTE_LONG: "long",
    AddressingMode.IMMEDIATE: "#const",
    AddressingMode.DP_INDEXED_X: "dp,x",
    AddressingMode.ABSOLUTE_INDEXED_X: "addr,x",
    AddressingMode.ABSOLUTE_INDEXED_Y: "addr,y",
    AddressingMode.ABSOLUTE_LONG_INDEXED_X: "long,x",
    AddressingMode.DP_INDIRECT: "(dp)",
    AddressingMode.DP_INDEXED_INDIRECT_X: "(dp,x)",
    AddressingMode.DP_INDIRECT_INDEXED_Y: "(dp),y",
    AddressingMode.DP_INDIRECT_LONG: "[dp]",
    AddressingMode.DP_INDIRECT_LONG_INDEXED_Y: "[dp],y",
    AddressingMode.STACK_RELATIVE: "sr,s",
    AddressingMode.SR_INDIRECT_INDEXED_Y: "(sr,s),y",
}


# =============================================================================
# Opcode Table
# =============================================================================
# Key: (mnemonic, addressing_mode)
# Value: opcode byte
#
# The accumulator group is generated from base opcodes and per-mode
# offsets; see the W65C816S opcode matrix, columns 1-F of rows 0-F.
# =============================================================================

ACCUMULATOR_GROUP_BASES: dict[str, int] = {
    "ORA": 0x00,
    "AND": 0x20,
    "EOR": 0x40,
    "ADC": 0x60,
    "STA": 0x80,
    "LDA": 0xA0,
    "CMP": 0xC0,
    "SBC": 0xE0,
}

ACCUMULATOR_GROUP_OFFSETS: dict[AddressingMode, int] = {
    AddressingMode.DP_INDEXED_INDIRECT_X: 0x01,
    AddressingMode.STACK_RELATIVE: 0x03,
    AddressingMode.DIRECT_PAGE: 0x05,
    AddressingMode.DP_INDIRECT_LONG: 0x07,
    AddressingMode.IMMEDIATE: 0x09,
    AddressingMode.ABSOLUTE: 0x0D,
    AddressingMode.ABSOLUTE_LONG: 0x0F,
    AddressingMode.DP_INDIRECT_INDEXED_Y: 0x11,
    AddressingMode.DP_INDIRECT: 0x12,
    AddressingMode.SR_INDIRECT_INDEXED_Y: 0x13,
    AddressingMode.DP_INDEXED_X: 0x15,
    AddressingMode.DP_INDIRECT_LONG_INDEXED_Y: 0x17,
    AddressingMode.ABSOLUTE_INDEXED_Y: 0x19,
    AddressingMode.ABSOLUTE_INDEXED_X: 0x1D,
    AddressingMode.ABSOLUTE_LONG_INDEXED_X: 0x1F,
}

# Instructions that cannot use immediate mode (store instructions)
NO_IMMEDIATE_INSTRUCTIONS: frozenset[str] = frozenset({"STA"})


def _build_opcode_table() -> dict[tuple[str, AddressingMode], int]:
    table = {}
    for mnemonic, base in ACCUMULATOR_GROUP_BASES.items():
        for mode, offset in ACCUMULATOR_GROUP_OFFSETS.items():
            if mode is AddressingMode.IMMEDIATE and mnemonic in NO_IMMEDIATE_INSTRUCTIONS:
                continue
            table[(mnemonic, mode)] = base + offset
    return table


OPCODE_TABLE: dict[tuple[str, AddressingMode], int] = _build_opcode_table()

# Set of all mnemonics the table can encode
MNEMONICS: frozenset[str] = frozenset({
    mnemonic for mnemonic, _ in OPCODE_TABLE.keys()
})


# =============================================================================
# Lookup Functions
# =============================================================================

def get_opcode(mnemonic: str, mode: AddressingMode) -> Optional[int]:
    """
    Look up the opcode byte for a mnemonic and addressing mode.

    Args:
        mnemonic: The instruction mnemonic (case-insensitive, e.g. "lda")
        mode: The addressing mode

    Returns:
        The opcode byte, or None if the combination does not exist
    """
    return OPCODE_TABLE.get((mnemonic.upper(), mode))


def get_valid_modes(mnemonic: str) -> list[AddressingMode]:
    """
    Get all addressing modes an instruction can be encoded with.

    Args:
        mnemonic: The instruction mnemonic

    Returns:
        List of AddressingModes, empty for unknown mnemonics
    """
    mnemonic = mnemonic.upper()
    return [
        mode for (m, mode) in OPCODE_TABLE.keys()
        if m == mnemonic
    ]


def is_valid_instruction(mnemonic: str) -> bool:
    """Check if a mnemonic is in the opcode table."""
    return mnemonic.upper() in MNEMONICS
