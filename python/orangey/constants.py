"""Frozen constants for the orangey generator."""

MASK64 = (1 << 64) - 1
MASK128 = (1 << 128) - 1

MUL = 0x2360ED051FC65DA44385DF649FCCF645

DEFAULT_STATE = 0xCE84809586CF8D1F17E1E9805A1B4141
DEFAULT_INC = 0xB0A3E85A992AFE5A280AF6FDEECF029F

# Raw-output bit width and the shift that exposes the rotate amount.
OUTPUT_BITS = 64
ROTATE_SHIFT = 122

# IEEE-754 binary64 layout used by uniform_double.
DOUBLE_SIGNIFICAND_MASK = 0x000FFFFFFFFFFFFF
DOUBLE_ONE_EXPONENT = 0x3FF0000000000000

# Smallest exponent all_doubles will descend to before returning 0.0.
MIN_DOUBLE_EXPONENT = -1074
