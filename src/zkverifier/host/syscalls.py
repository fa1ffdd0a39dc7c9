"""The alt_bn128 primitives offered by the execution host.

All the primitives take and return points in the big-endian host convention. Malformed inputs raise
`AltBn128Error`; a pairing check over well-formed points returns a boolean.
"""

from collections.abc import Callable, Sequence

from py_ecc.optimized_bn128 import add, multiply

from zkverifier.config import HostConfig
from zkverifier.elliptic_curves.pairing import pairing_product_is_one
from zkverifier.elliptic_curves.points import g1_from_bytes, g1_to_bytes, g2_from_bytes
from zkverifier.errors import AltBn128Error, FormatError, InvalidPointError
from zkverifier.host.compute_meter import ComputeMeter
from zkverifier.parameters import G1_SIZE, G2_SIZE, SCALAR_SIZE

PairingCheck = Callable[[Sequence[tuple[bytes, bytes]]], bool]
"""A pairing primitive taking big-endian (G1, G2) pairs.

Implementations must report malformed points by raising `AltBn128Error`, which the verifier records as an invalid
point. Any other exception is a fault of the host: it aborts the instruction and nothing is committed.
"""


def _decode_g1(data: bytes):
    try:
        return g1_from_bytes(data)
    except (FormatError, InvalidPointError) as err:
        raise AltBn128Error(str(err)) from err


def _decode_g2(data: bytes):
    try:
        return g2_from_bytes(data)
    except (FormatError, InvalidPointError) as err:
        raise AltBn128Error(str(err)) from err


def alt_bn128_addition(data: bytes) -> bytes:
    """Return P + Q for data = P || Q (two points of G1, 128 bytes)."""
    if len(data) != 2 * G1_SIZE:
        msg = f"Addition input must be {2 * G1_SIZE} bytes, got {len(data)}"
        raise AltBn128Error(msg)
    return g1_to_bytes(add(_decode_g1(data[:G1_SIZE]), _decode_g1(data[G1_SIZE:])))


def alt_bn128_multiplication(data: bytes) -> bytes:
    """Return s * P for data = P || s (a point of G1 and a 32-byte big-endian scalar, 96 bytes).

    The scalar is not reduced: any 256-bit value is accepted.
    """
    if len(data) != G1_SIZE + SCALAR_SIZE:
        msg = f"Multiplication input must be {G1_SIZE + SCALAR_SIZE} bytes, got {len(data)}"
        raise AltBn128Error(msg)
    point = _decode_g1(data[:G1_SIZE])
    return g1_to_bytes(multiply(point, int.from_bytes(data[G1_SIZE:], byteorder="big")))


def alt_bn128_pairing(pairs: Sequence[tuple[bytes, bytes]]) -> bool:
    """Check whether prod_i e(P_i, Q_i) is the identity of GT.

    Args:
        pairs: Sequence of (P_i, Q_i), with P_i a point of G1 (64 bytes) and Q_i a point of G2 (128 bytes).

    Raises:
        AltBn128Error: If a point is malformed, not on its curve, or not in the subgroup of order r.
    """
    decoded = []
    for p, q in pairs:
        if len(p) != G1_SIZE or len(q) != G2_SIZE:
            msg = f"Pairing pair must be ({G1_SIZE}, {G2_SIZE}) bytes, got ({len(p)}, {len(q)})"
            raise AltBn128Error(msg)
        decoded.append((_decode_g1(p), _decode_g2(q)))
    return pairing_product_is_one(decoded)


class HostSyscalls:
    """The primitives available to one instruction, charged against its compute meter.

    Attributes:
        meter (ComputeMeter): The meter of the instruction.
        config (HostConfig): The costs of the primitives.
        pairing_check (PairingCheck): The pairing primitive. Injected so that it can be replaced in tests. It
            must raise `AltBn128Error` on malformed points.
    """

    def __init__(self, meter: ComputeMeter, config: HostConfig, pairing_check: PairingCheck = alt_bn128_pairing):
        self.meter = meter
        self.config = config
        self.pairing_check = pairing_check

    def addition(self, data: bytes) -> bytes:
        self.meter.consume(self.config.addition_cost, "alt_bn128_addition")
        return alt_bn128_addition(data)

    def multiplication(self, data: bytes) -> bytes:
        self.meter.consume(self.config.multiplication_cost, "alt_bn128_multiplication")
        return alt_bn128_multiplication(data)

    def pairing(self, pairs: Sequence[tuple[bytes, bytes]]) -> bool:
        self.meter.consume(self.config.pairing_cost(len(pairs)), "alt_bn128_pairing")
        return self.pairing_check(pairs)
