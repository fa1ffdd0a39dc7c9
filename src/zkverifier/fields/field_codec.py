"""Byte codec for BN254 field elements.

Field elements are stored little-endian (the convention of keys and proofs at rest) and exchanged with the host
big-endian. Both conventions use fixed-width 32-byte elements, so converting between them amounts to reversing
every element in place.
"""

from zkverifier.errors import FormatError
from zkverifier.parameters import FIELD_ELEMENT_SIZE, q, r

BYTEORDERS = ("big", "little")


def convert_endianness(buffer: bytes, element_size: int = FIELD_ELEMENT_SIZE) -> bytes:
    """Convert a buffer of field elements between the little-endian and the big-endian conventions.

    The conversion reverses each `element_size` chunk of `buffer` and keeps the chunks in their order. In
    particular, the components (c0, c1) of an element of Fq2 stay in place, only their bytes are reversed.

    Args:
        buffer (bytes): The concatenation of fixed-width field elements.
        element_size (int): The width of one field element. Defaults to 32.

    Returns:
        A buffer of the same length. The conversion is an involution.

    Raises:
        FormatError: If the length of `buffer` is not a multiple of `element_size`.
    """
    if len(buffer) % element_size != 0:
        msg = f"Buffer of length {len(buffer)} is not a multiple of the element width {element_size}"
        raise FormatError(msg)
    return b"".join(
        buffer[i : i + element_size][::-1] for i in range(0, len(buffer), element_size)
    )


def field_to_bytes(value: int, byteorder: str = "big", modulus: int = q) -> bytes:
    """Serialise an element of the field of order `modulus` to a fixed-width buffer.

    Args:
        value (int): The element to serialise. Must be in [0, modulus).
        byteorder (str): Either `"big"` (host convention) or `"little"` (storage convention).
        modulus (int): The modulus of the field. Defaults to the modulus of the base field.

    Raises:
        FormatError: If `value` is not a canonical representative of an element of the field.
    """
    assert byteorder in BYTEORDERS, f"{byteorder} is not a valid byteorder"
    if not 0 <= value < modulus:
        msg = f"Value {value} is not in the range [0, {modulus})"
        raise FormatError(msg)
    return value.to_bytes(FIELD_ELEMENT_SIZE, byteorder=byteorder)


def bytes_to_field(buffer: bytes, byteorder: str = "big", modulus: int = q) -> int:
    """Deserialise a fixed-width buffer into an element of the field of order `modulus`.

    Args:
        buffer (bytes): The serialised element. Must be exactly 32 bytes.
        byteorder (str): Either `"big"` (host convention) or `"little"` (storage convention).
        modulus (int): The modulus of the field. Defaults to the modulus of the base field.

    Raises:
        FormatError: If `buffer` has the wrong width or encodes a value greater than the field size.
    """
    assert byteorder in BYTEORDERS, f"{byteorder} is not a valid byteorder"
    if len(buffer) != FIELD_ELEMENT_SIZE:
        msg = f"Field element must be {FIELD_ELEMENT_SIZE} bytes, got {len(buffer)}"
        raise FormatError(msg)
    value = int.from_bytes(buffer, byteorder=byteorder)
    if value >= modulus:
        msg = "Value is greater than the field size"
        raise FormatError(msg)
    return value


def scalar_to_bytes(value: int, byteorder: str = "big") -> bytes:
    """Serialise a scalar (an element of Fr)."""
    return field_to_bytes(value, byteorder, r)


def bytes_to_scalar(buffer: bytes, byteorder: str = "big") -> int:
    """Deserialise a scalar (an element of Fr)."""
    return bytes_to_field(buffer, byteorder, r)
