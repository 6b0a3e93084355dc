"""MessagePack inspection CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

from ..codec import codes
from ..codec.decoder import Decoder
from ..codec.timestamp import decode_time
from ..codec.transvalue import bytes_to_values
from ..exceptions import InvalidTagError, RecursionLimitExceededError


def inspect_file(file_path: Path) -> None:
    """Print an annotated walk of every top-level value in a MessagePack file.

    Args:
        file_path: Path to a file holding one or more concatenated values
    """
    data = file_path.read_bytes()

    print("|" * 7, "valuepack: MessagePack Value Codec", "|" * 7)
    print(f"{file_path}: {len(data)} byte{'s' if len(data) != 1 else ''}")
    print()

    dec = Decoder(data)
    count = 0
    while dec.remaining_length() > 0:
        count += 1
        print(f"{'=' * 19} value {count} {'=' * 19}")
        inspect_value(dec, 0)
        print()

    print(f"{count} value{'s' if count != 1 else ''} decoded.")


def inspect_value(dec: Decoder, depth: int) -> None:
    """Print one value (and its children) read from ``dec``.

    Each line shows the offset of the tag byte, the tag itself, the format
    name and either the scalar value or the container size.

    Args:
        dec: Decoder positioned at a tag byte
        depth: Nesting depth, used for indentation and the depth limit
    """
    offset = dec.position
    c = dec.read_code()
    indent = "  " * depth

    def emit(detail: str) -> None:
        name = f"{indent}{codes.tag_name(c)}"
        print(f"{offset:08x}  {c:02x}  {name:<28}{detail}")

    if c == codes.NIL:
        emit("nil")
    elif codes.is_bool(c):
        emit("true" if c == codes.TRUE else "false")
    elif codes.is_float(c):
        emit(repr(dec.read_float(c)))
    elif codes.is_integer(c):
        emit(str(dec.read_int(c)))
    elif codes.is_string(c):
        n = dec.bytes_len(c)
        payload = dec.read_raw(n) if n > 0 else b""
        emit(f"({n}) {json.dumps(payload.decode('utf-8', 'replace'), ensure_ascii=False)}")
    elif codes.is_bin(c):
        n = dec.bytes_len(c)
        payload = dec.read_raw(n) if n > 0 else b""
        emit(f"({n}) {payload.hex()}")
    elif codes.is_array(c):
        _check_depth(dec, depth)
        n = dec.array_len(c)
        emit(f"{n} item{'s' if n != 1 else ''}")
        for _ in range(n):
            inspect_value(dec, depth + 1)
    elif codes.is_hashmap(c):
        _check_depth(dec, depth)
        n = dec.map_len(c)
        emit(f"{n} entr{'ies' if n != 1 else 'y'}")
        for _ in range(n):
            inspect_value(dec, depth + 1)
            inspect_value(dec, depth + 1)
    elif codes.is_ext(c):
        ext_type, n = dec.read_ext_header(c)
        payload = dec.read_raw(n) if n > 0 else b""
        if ext_type == codes.TIME_EXT_ID:
            ts = decode_time(payload)
            emit(f"timestamp {ts.seconds}.{ts.nanoseconds:09d}")
        else:
            emit(f"type {ext_type} ({n}) {payload.hex()}")
    else:
        raise InvalidTagError(c, f"value at offset {offset}")


def dump_json(file_path: Path) -> None:
    """Decode every top-level value in a file and print each as one JSON line.

    Args:
        file_path: Path to a file holding one or more concatenated values
    """
    for value in bytes_to_values(file_path.read_bytes()):
        print(value)


def _check_depth(dec: Decoder, depth: int) -> None:
    if depth >= dec.config.max_depth:
        raise RecursionLimitExceededError(dec.config.max_depth)
