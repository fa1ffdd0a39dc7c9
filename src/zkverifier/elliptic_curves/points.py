"""Validated (de)serialisation of BN254 points.

Points are `py_ecc.optimized_bn128` Jacobian triples. They are serialised uncompressed:
    - G1: x || y
    - G2: x.c0 || x.c1 || y.c0 || y.c1
where every coordinate is a 32-byte field element in the requested byte order. The point at infinity is
serialised as the all-zero buffer.
"""

from py_ecc.optimized_bn128 import FQ, FQ2, b, b2, is_inf, is_on_curve, multiply, neg, normalize

from zkverifier.errors import FormatError, InvalidPointError
from zkverifier.fields.field_codec import BYTEORDERS
from zkverifier.parameters import FIELD_ELEMENT_SIZE, G1_SIZE, G2_SIZE, q, r

G1_INFINITY = (FQ.one(), FQ.one(), FQ.zero())
G2_INFINITY = (FQ2.one(), FQ2.one(), FQ2.zero())


def _split_coordinates(buffer: bytes, byteorder: str) -> list[int]:
    assert byteorder in BYTEORDERS, f"{byteorder} is not a valid byteorder"
    coordinates = [
        int.from_bytes(buffer[i : i + FIELD_ELEMENT_SIZE], byteorder=byteorder)
        for i in range(0, len(buffer), FIELD_ELEMENT_SIZE)
    ]
    if any(coordinate >= q for coordinate in coordinates):
        msg = "Coordinate is greater than the field size"
        raise InvalidPointError(msg)
    return coordinates


def _join_coordinates(coordinates: list[int], byteorder: str) -> bytes:
    assert byteorder in BYTEORDERS, f"{byteorder} is not a valid byteorder"
    return b"".join(coordinate.to_bytes(FIELD_ELEMENT_SIZE, byteorder=byteorder) for coordinate in coordinates)


def is_valid_g1(point) -> bool:
    """Check whether `point` satisfies the equation y^2 = x^3 + 3.

    G1 has prime order, so being on the curve implies being in the correct subgroup.
    """
    return is_on_curve(point, b)


def is_valid_g2(point) -> bool:
    """Check whether `point` is on the twist and in the subgroup of order `r`."""
    if not is_on_curve(point, b2):
        return False
    if is_inf(point):
        return True
    # r * P == 0  <=>  (r - 1) * P == -P
    return points_equal(multiply(point, r - 1), neg(point))


def points_equal(first, second) -> bool:
    """Compare two Jacobian points."""
    if is_inf(first) or is_inf(second):
        return is_inf(first) and is_inf(second)
    return normalize(first) == normalize(second)


def g1_to_bytes(point, byteorder: str = "big") -> bytes:
    """Serialise a point of G1."""
    if is_inf(point):
        return bytes(G1_SIZE)
    x, y = normalize(point)
    return _join_coordinates([int(x), int(y)], byteorder)


def g1_from_bytes(buffer: bytes, byteorder: str = "big"):
    """Deserialise and validate a point of G1.

    Raises:
        FormatError: If `buffer` is not 64 bytes long.
        InvalidPointError: If a coordinate exceeds the field size or the point is not on the curve.
    """
    if len(buffer) != G1_SIZE:
        msg = f"G1 point must be {G1_SIZE} bytes, got {len(buffer)}"
        raise FormatError(msg)
    x, y = _split_coordinates(buffer, byteorder)
    if x == 0 and y == 0:
        return G1_INFINITY
    point = (FQ(x), FQ(y), FQ.one())
    if not is_valid_g1(point):
        msg = "G1 point is not on the curve"
        raise InvalidPointError(msg)
    return point


def g2_to_bytes(point, byteorder: str = "big") -> bytes:
    """Serialise a point of G2."""
    if is_inf(point):
        return bytes(G2_SIZE)
    x, y = normalize(point)
    return _join_coordinates([int(c) for c in x.coeffs] + [int(c) for c in y.coeffs], byteorder)


def g2_from_bytes(buffer: bytes, byteorder: str = "big"):
    """Deserialise and validate a point of G2.

    Raises:
        FormatError: If `buffer` is not 128 bytes long.
        InvalidPointError: If a coordinate exceeds the field size, or the point is not on the twist or not in the
            subgroup of order `r`.
    """
    if len(buffer) != G2_SIZE:
        msg = f"G2 point must be {G2_SIZE} bytes, got {len(buffer)}"
        raise FormatError(msg)
    x0, x1, y0, y1 = _split_coordinates(buffer, byteorder)
    if not any((x0, x1, y0, y1)):
        return G2_INFINITY
    point = (FQ2([x0, x1]), FQ2([y0, y1]), FQ2.one())
    if not is_valid_g2(point):
        msg = "G2 point is not on the twist or not in the subgroup of order r"
        raise InvalidPointError(msg)
    return point


def negate_g1(point):
    """Return (x, q - y mod q) for a point (x, y) of G1.

    Raises:
        InvalidPointError: If `point` is not on the curve.
    """
    if not is_valid_g1(point):
        msg = "Cannot negate a point which is not on the curve"
        raise InvalidPointError(msg)
    return neg(point)


def negate_g1_bytes(buffer: bytes, byteorder: str = "big") -> bytes:
    """Negate a serialised point of G1 by replacing its y-coordinate with q - y mod q.

    The x-coordinate is copied verbatim.

    Raises:
        FormatError: If `buffer` is not 64 bytes long.
        InvalidPointError: If the point is not on the curve.
    """
    g1_from_bytes(buffer, byteorder)
    y = int.from_bytes(buffer[FIELD_ELEMENT_SIZE:], byteorder=byteorder)
    return buffer[:FIELD_ELEMENT_SIZE] + ((q - y) % q).to_bytes(FIELD_ELEMENT_SIZE, byteorder=byteorder)
