"""Field element helpers for proof public inputs.

Public inputs arrive as JSON integers, 0x-prefixed hex strings, or decimal
strings. Names are bound to inputs by reading their UTF-8 bytes as a
big-endian unsigned integer and comparing canonical hex forms.

String forms are parsed strictly: no whitespace, sign or "_" separators,
ASCII digits only.
"""
import re
from typing import Any

_HEX_INPUT = re.compile(r"0[xX][0-9a-fA-F]+")
_DECIMAL_INPUT = re.compile(r"[0-9]+")


def to_field_int(value: Any) -> int:
    """Parse a public input into a non-negative integer.

    Raises:
        ValueError: value is not an integer, hex string or decimal string
    """
    if isinstance(value, bool):
        raise ValueError("boolean is not a field element")
    if isinstance(value, int):
        result = value
    elif isinstance(value, str):
        if _HEX_INPUT.fullmatch(value):
            result = int(value[2:], 16)
        elif _DECIMAL_INPUT.fullmatch(value):
            result = int(value, 10)
        else:
            raise ValueError(f"not a field element: {value!r}")
    else:
        raise ValueError(f"not a field element: {type(value).__name__}")

    if result < 0:
        raise ValueError("field element must be non-negative")
    return result


def canonical_hex(value: int) -> str:
    """Minimal even-length lowercase hex with 0x prefix ("0x00" for zero)."""
    digits = format(value, "x")
    if len(digits) % 2:
        digits = "0" + digits
    return "0x" + digits


def encode_name(name: str) -> int:
    """Encode a name as the big-endian integer of its UTF-8 bytes."""
    return int.from_bytes(name.encode("utf-8"), "big")


def name_matches_input(name: str, public_input: Any) -> bool:
    """Whether a plaintext name equals the value committed in a public input."""
    return canonical_hex(encode_name(name)) == canonical_hex(to_field_int(public_input))
