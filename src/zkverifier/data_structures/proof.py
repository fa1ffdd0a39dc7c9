"""Groth16 proof."""

from dataclasses import dataclass
from typing import Self

from zkverifier.elliptic_curves.points import g1_from_bytes, g1_to_bytes, g2_from_bytes, g2_to_bytes, points_equal
from zkverifier.errors import FormatError
from zkverifier.parameters import G1_SIZE, G2_SIZE, PROOF_SIZE


@dataclass
class Proof:
    """Groth16 proof.

    Attributes:
        a: Component `A` of the proof, in G1.
        b: Component `B` of the proof, in G2.
        c: Component `C` of the proof, in G1.
    """

    a: tuple
    b: tuple
    c: tuple

    def to_bytes(self, byteorder: str = "little") -> bytes:
        """Serialise the proof as A || B || C (256 bytes)."""
        return g1_to_bytes(self.a, byteorder) + g2_to_bytes(self.b, byteorder) + g1_to_bytes(self.c, byteorder)

    @classmethod
    def from_bytes(cls, data: bytes, byteorder: str = "little") -> Self:
        """Deserialise and validate a proof.

        Raises:
            FormatError: If `data` is not 256 bytes long.
            InvalidPointError: If one of the components is not a valid point.
        """
        if len(data) != PROOF_SIZE:
            msg = f"Proof must be {PROOF_SIZE} bytes, got {len(data)}"
            raise FormatError(msg)
        return cls(
            a=g1_from_bytes(data[:G1_SIZE], byteorder),
            b=g2_from_bytes(data[G1_SIZE : G1_SIZE + G2_SIZE], byteorder),
            c=g1_from_bytes(data[G1_SIZE + G2_SIZE :], byteorder),
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Proof):
            return NotImplemented
        return all(points_equal(x, y) for x, y in ((self.a, other.a), (self.b, other.b), (self.c, other.c)))
