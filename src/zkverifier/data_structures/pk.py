"""Groth16 proving key."""

from dataclasses import dataclass
from typing import Self

from zkverifier.data_structures.vk import VerifyingKey
from zkverifier.elliptic_curves.points import g1_from_bytes, g1_to_bytes, g2_from_bytes, g2_to_bytes, points_equal
from zkverifier.errors import FormatError
from zkverifier.parameters import G1_SIZE, G2_SIZE
from zkverifier.util.utility_functions import ByteReader, encode_u8, encode_u32

PK_MAGIC = b"ZKPK"
PK_VERSION = 1


@dataclass
class ProvingKey:
    """Groth16 proving key.

    Attributes:
        vk (VerifyingKey): The verifying key generated alongside the proving key.
        beta_g1: beta * G1.
        delta_g1: delta * G1.
        a_query (list): u_i(tau) * G1 for every variable i.
        b_g1_query (list): v_i(tau) * G1 for every variable i.
        b_g2_query (list): v_i(tau) * G2 for every variable i.
        h_query (list): tau^j * Z(tau) / delta * G1 for j in [0, N-1), where N is the size of the domain.
        l_query (list): (beta * u_i(tau) + alpha * v_i(tau) + w_i(tau)) / delta * G1 for every witness variable i.
    """

    vk: VerifyingKey
    beta_g1: tuple
    delta_g1: tuple
    a_query: list
    b_g1_query: list
    b_g2_query: list
    h_query: list
    l_query: list

    @property
    def num_instance_variables(self) -> int:
        return len(self.vk.gamma_abc_g1)

    @property
    def num_witness_variables(self) -> int:
        return len(self.l_query)

    @property
    def domain_size(self) -> int:
        return len(self.h_query) + 1

    def to_bytes(self) -> bytes:
        """Serialise the key with the little-endian storage convention.

        Layout: magic || version || vk || beta_g1 || delta_g1 || a_query || b_g1_query || b_g2_query || h_query ||
        l_query, where every query is prefixed by its length (u32).
        """
        out = PK_MAGIC + encode_u8(PK_VERSION) + self.vk.to_bytes()
        out += g1_to_bytes(self.beta_g1, "little") + g1_to_bytes(self.delta_g1, "little")
        for query, to_bytes in (
            (self.a_query, g1_to_bytes),
            (self.b_g1_query, g1_to_bytes),
            (self.b_g2_query, g2_to_bytes),
            (self.h_query, g1_to_bytes),
            (self.l_query, g1_to_bytes),
        ):
            out += encode_u32(len(query))
            for point in query:
                out += to_bytes(point, "little")
        return out

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """Deserialise a key serialised with `to_bytes`.

        Raises:
            FormatError: If the blob is truncated, has trailing bytes, a bad header, or inconsistent query lengths.
            InvalidPointError: If one of the points is invalid.
        """
        reader = ByteReader(data)
        if reader.take(len(PK_MAGIC)) != PK_MAGIC:
            msg = "Not a proving key"
            raise FormatError(msg)
        version = reader.u8()
        if version != PK_VERSION:
            msg = f"Unsupported proving key version {version}"
            raise FormatError(msg)
        vk = VerifyingKey.read(reader)
        beta_g1 = g1_from_bytes(reader.take(G1_SIZE), "little")
        delta_g1 = g1_from_bytes(reader.take(G1_SIZE), "little")
        queries = []
        for size, from_bytes in (
            (G1_SIZE, g1_from_bytes),
            (G1_SIZE, g1_from_bytes),
            (G2_SIZE, g2_from_bytes),
            (G1_SIZE, g1_from_bytes),
            (G1_SIZE, g1_from_bytes),
        ):
            n = reader.u32()
            queries.append([from_bytes(reader.take(size), "little") for _ in range(n)])
        reader.finish()

        a_query, b_g1_query, b_g2_query, h_query, l_query = queries
        num_variables = len(vk.gamma_abc_g1) + len(l_query)
        if not len(a_query) == len(b_g1_query) == len(b_g2_query) == num_variables:
            msg = "Inconsistent query lengths in proving key"
            raise FormatError(msg)
        return cls(vk, beta_g1, delta_g1, a_query, b_g1_query, b_g2_query, h_query, l_query)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ProvingKey):
            return NotImplemented
        queries = (
            (self.a_query, other.a_query),
            (self.b_g1_query, other.b_g1_query),
            (self.b_g2_query, other.b_g2_query),
            (self.h_query, other.h_query),
            (self.l_query, other.l_query),
        )
        if any(len(x) != len(y) for x, y in queries):
            return False
        return (
            self.vk == other.vk
            and points_equal(self.beta_g1, other.beta_g1)
            and points_equal(self.delta_g1, other.delta_g1)
            and all(points_equal(x, y) for query, other_query in queries for x, y in zip(query, other_query))
        )
