#!/usr/bin/env python3
"""Basic usage example for valuepack.

This example demonstrates:
1. Defining records with Pydantic
2. Encoding a record to MessagePack
3. Decoding back to a record and to a Value tree
4. Calculating encoded sizes
5. Writing and reading values with the low-level Encoder/Decoder
"""

from __future__ import annotations

from valuepack import (
    Decoder,
    Encoder,
    Record,
    Timestamp,
    bytes_to_value,
    decode,
    encode,
    encoded_size,
    field_sizes,
)


class Sub(Record):
    """Nested record."""

    a: int = 0
    b: bool = False
    c: dict[str, str] = {}


class Student(Record):
    """Student record with a nested record field."""

    name: str = ""
    age: int = 0
    sub: Sub = Sub()


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("valuepack Basic Usage Example")
    print("=" * 60)
    print()

    print("1. Creating a student record...")
    student = Student(name="huangjian", age=10000, sub=Sub(a=100, c={"k": "v"}))
    print(f"   {student!r}")
    print()

    print("2. Analyzing field sizes...")
    for field_name, size in field_sizes(student).items():
        print(f"   {field_name}: {size} bytes")
    print(f"   Total: {encoded_size(student)} bytes")
    print()

    print("3. Encoding to MessagePack...")
    data = encode(student)
    print(f"   Encoded size: {len(data)} bytes")
    print(f"   Hex: {data.hex()}")
    print()

    print("4. Decoding...")
    decoded = decode(Student, data)
    print(f"   As record: {decoded!r}")
    print(f"   As Value:  {bytes_to_value(data)}")
    print()

    print("5. Verifying round-trip...")
    if decoded == student:
        print("   ✓ Round-trip successful! Records match.")
    else:
        print("   ✗ Round-trip failed! Records don't match.")
    print()

    print("6. Low-level encoding...")
    enc = Encoder()
    enc.encode_array_len(3)
    enc.encode_int(-214748364700)
    enc.encode_float32(1.23456)
    enc.encode_time(Timestamp.now())
    wire = enc.to_bytes()
    print(f"   Hex: {wire.hex()}")

    dec = Decoder(wire)
    n = dec.decode_array_len()
    print(f"   Array of {n}: {dec.decode_int()}, {dec.decode_float32()}, {dec.decode_time()}")
    print()

    print("7. Comparing to JSON encoding...")
    json_bytes = student.model_dump_json().encode("utf-8")
    print(f"   MessagePack size: {len(data)} bytes")
    print(f"   JSON size: {len(json_bytes)} bytes")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
