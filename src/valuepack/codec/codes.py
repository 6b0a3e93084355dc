"""MessagePack tag byte table.

Constants for every MessagePack format byte and pure predicates that classify
a tag byte. The ranges follow https://github.com/msgpack/msgpack/blob/master/spec.md
and partition 0x00-0xff without overlaps (0xc1 is never used).
"""

from __future__ import annotations

NIL = 0xC0
NEVER_USED = 0xC1
FALSE = 0xC2
TRUE = 0xC3

BIN_8 = 0xC4
BIN_16 = 0xC5
BIN_32 = 0xC6

EXT_8 = 0xC7
EXT_16 = 0xC8
EXT_32 = 0xC9

FLOAT_32 = 0xCA
FLOAT_64 = 0xCB

UINT_8 = 0xCC
UINT_16 = 0xCD
UINT_32 = 0xCE
UINT_64 = 0xCF

INT_8 = 0xD0
INT_16 = 0xD1
INT_32 = 0xD2
INT_64 = 0xD3

FIX_EXT_1 = 0xD4
FIX_EXT_2 = 0xD5
FIX_EXT_4 = 0xD6
FIX_EXT_8 = 0xD7
FIX_EXT_16 = 0xD8

STR_8 = 0xD9
STR_16 = 0xDA
STR_32 = 0xDB

ARRAY_16 = 0xDC
ARRAY_32 = 0xDD

MAP_16 = 0xDE
MAP_32 = 0xDF

# positive fixint: 0xxxxxxx
POS_FIXED_NUM_HIGH = 0x7F

# fixmap: 1000xxxx
FIXED_MAP_LOW = 0x80
FIXED_MAP_HIGH = 0x8F
FIXED_MAP_MASK = 0x0F

# fixarray: 1001xxxx
FIXED_ARRAY_LOW = 0x90
FIXED_ARRAY_HIGH = 0x9F
FIXED_ARRAY_MASK = 0x0F

# fixstr: 101xxxxx
FIXED_STR_LOW = 0xA0
FIXED_STR_HIGH = 0xBF
FIXED_STR_MASK = 0x1F

# negative fixint: 111xxxxx
NEG_FIXED_NUM_LOW = 0xE0

# Extension type identifier reserved for timestamps
TIME_EXT_ID = -1

FIX_EXT_LENGTHS = {
    FIX_EXT_1: 1,
    FIX_EXT_2: 2,
    FIX_EXT_4: 4,
    FIX_EXT_8: 8,
    FIX_EXT_16: 16,
}

_NAMES = {
    NIL: "nil",
    NEVER_USED: "never used",
    FALSE: "false",
    TRUE: "true",
    BIN_8: "bin 8",
    BIN_16: "bin 16",
    BIN_32: "bin 32",
    EXT_8: "ext 8",
    EXT_16: "ext 16",
    EXT_32: "ext 32",
    FLOAT_32: "float 32",
    FLOAT_64: "float 64",
    UINT_8: "uint 8",
    UINT_16: "uint 16",
    UINT_32: "uint 32",
    UINT_64: "uint 64",
    INT_8: "int 8",
    INT_16: "int 16",
    INT_32: "int 32",
    INT_64: "int 64",
    FIX_EXT_1: "fixext 1",
    FIX_EXT_2: "fixext 2",
    FIX_EXT_4: "fixext 4",
    FIX_EXT_8: "fixext 8",
    FIX_EXT_16: "fixext 16",
    STR_8: "str 8",
    STR_16: "str 16",
    STR_32: "str 32",
    ARRAY_16: "array 16",
    ARRAY_32: "array 32",
    MAP_16: "map 16",
    MAP_32: "map 32",
}


def is_fixed_num(c: int) -> bool:
    """Return True for positive (0x00-0x7f) and negative (0xe0-0xff) fixints."""
    return c <= POS_FIXED_NUM_HIGH or c >= NEG_FIXED_NUM_LOW


def is_fixed_map(c: int) -> bool:
    return FIXED_MAP_LOW <= c <= FIXED_MAP_HIGH


def is_fixed_array(c: int) -> bool:
    return FIXED_ARRAY_LOW <= c <= FIXED_ARRAY_HIGH


def is_fixed_string(c: int) -> bool:
    return FIXED_STR_LOW <= c <= FIXED_STR_HIGH


def is_ext(c: int) -> bool:
    return FIX_EXT_1 <= c <= FIX_EXT_16 or EXT_8 <= c <= EXT_32


def is_nil(c: int) -> bool:
    return c == NIL


def is_bool(c: int) -> bool:
    return c == FALSE or c == TRUE


def is_float(c: int) -> bool:
    return c == FLOAT_32 or c == FLOAT_64


def is_integer(c: int) -> bool:
    """Return True for fixints and the uint/int 8-64 formats."""
    return is_fixed_num(c) or UINT_8 <= c <= INT_64


def is_number(c: int) -> bool:
    """Return True for any integer or float format."""
    return is_integer(c) or is_float(c)


def is_string(c: int) -> bool:
    return is_fixed_string(c) or STR_8 <= c <= STR_32


def is_bin(c: int) -> bool:
    return BIN_8 <= c <= BIN_32


def is_array(c: int) -> bool:
    return is_fixed_array(c) or c == ARRAY_16 or c == ARRAY_32


def is_hashmap(c: int) -> bool:
    return is_fixed_map(c) or c == MAP_16 or c == MAP_32


def fixed_num_value(c: int) -> int:
    """Return the integer embedded in a fixint tag.

    Positive fixints are the tag byte itself; negative fixints are the tag
    reinterpreted as a signed 8-bit integer (-32..-1).

    Args:
        c: Tag byte for which ``is_fixed_num`` is True

    Returns:
        Embedded integer value
    """
    if c >= NEG_FIXED_NUM_LOW:
        return c - 0x100
    return c


def tag_name(c: int) -> str:
    """Return the MessagePack format name of a tag byte.

    Args:
        c: Tag byte (0-255)

    Returns:
        Format name such as ``"fixstr"`` or ``"uint 16"``

    Example:
        >>> tag_name(0xcd)
        'uint 16'
        >>> tag_name(0x93)
        'fixarray'
    """
    if c <= POS_FIXED_NUM_HIGH:
        return "positive fixint"
    if is_fixed_map(c):
        return "fixmap"
    if is_fixed_array(c):
        return "fixarray"
    if is_fixed_string(c):
        return "fixstr"
    if c >= NEG_FIXED_NUM_LOW:
        return "negative fixint"
    return _NAMES.get(c, "unknown")
