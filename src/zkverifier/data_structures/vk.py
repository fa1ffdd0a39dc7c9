"""Groth16 verifying key."""

from dataclasses import dataclass
from typing import Self

from zkverifier.elliptic_curves.points import g1_from_bytes, g1_to_bytes, g2_from_bytes, g2_to_bytes, points_equal
from zkverifier.errors import FormatError
from zkverifier.parameters import G1_SIZE, G2_SIZE
from zkverifier.util.utility_functions import ByteReader, encode_u8, encode_u32

VK_MAGIC = b"ZKVK"
VK_VERSION = 1


@dataclass
class VerifyingKey:
    r"""Groth16 verifying key.

    Attributes:
        alpha_g1: alpha * G1.
        beta_g2: beta * G2.
        gamma_g2: gamma * G2.
        delta_g2: delta * G2.
        gamma_abc_g1 (list): The points gamma_abc[i] such that the verifier computes
                gamma_abc[0] + \sum_{i >= 1} pub[i-1] * gamma_abc[i]
            where pub[i] is the i-th public input. Its length is the number of public inputs plus one.
    """

    alpha_g1: tuple
    beta_g2: tuple
    gamma_g2: tuple
    delta_g2: tuple
    gamma_abc_g1: list

    @property
    def num_public_inputs(self) -> int:
        return len(self.gamma_abc_g1) - 1

    def to_bytes(self) -> bytes:
        """Serialise the key with the little-endian storage convention.

        Layout: magic || version || alpha || beta || gamma || delta || n (u32) || gamma_abc[0..n].
        """
        out = VK_MAGIC + encode_u8(VK_VERSION)
        out += g1_to_bytes(self.alpha_g1, "little")
        for point in (self.beta_g2, self.gamma_g2, self.delta_g2):
            out += g2_to_bytes(point, "little")
        out += encode_u32(len(self.gamma_abc_g1))
        for point in self.gamma_abc_g1:
            out += g1_to_bytes(point, "little")
        return out

    @classmethod
    def read(cls, reader: ByteReader) -> Self:
        """Read a key from `reader`, validating its header and all its points."""
        if reader.take(len(VK_MAGIC)) != VK_MAGIC:
            msg = "Not a verifying key"
            raise FormatError(msg)
        version = reader.u8()
        if version != VK_VERSION:
            msg = f"Unsupported verifying key version {version}"
            raise FormatError(msg)
        alpha_g1 = g1_from_bytes(reader.take(G1_SIZE), "little")
        beta_g2, gamma_g2, delta_g2 = (g2_from_bytes(reader.take(G2_SIZE), "little") for _ in range(3))
        n = reader.u32()
        if n == 0:
            msg = "gamma_abc must contain at least one point"
            raise FormatError(msg)
        gamma_abc_g1 = [g1_from_bytes(reader.take(G1_SIZE), "little") for _ in range(n)]
        return cls(alpha_g1, beta_g2, gamma_g2, delta_g2, gamma_abc_g1)

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """Deserialise a key serialised with `to_bytes`.

        Raises:
            FormatError: If the blob is truncated, has trailing bytes, or a bad header.
            InvalidPointError: If one of the points is invalid.
        """
        reader = ByteReader(data)
        out = cls.read(reader)
        reader.finish()
        return out

    def __eq__(self, other) -> bool:
        if not isinstance(other, VerifyingKey):
            return NotImplemented
        if len(self.gamma_abc_g1) != len(other.gamma_abc_g1):
            return False
        pairs = [
            (self.alpha_g1, other.alpha_g1),
            (self.beta_g2, other.beta_g2),
            (self.gamma_g2, other.gamma_g2),
            (self.delta_g2, other.delta_g2),
            *zip(self.gamma_abc_g1, other.gamma_abc_g1),
        ]
        return all(points_equal(x, y) for x, y in pairs)
