"""Packaged proofs submitted to the execution host."""

from dataclasses import dataclass
from enum import IntEnum


class PackagingMode(IntEnum):
    """How much of the verification work is precomputed off the host.

    - LITE: raw proof and raw public inputs; the host negates `A` and accumulates the inputs.
    - PREPARED: `A` negated and prepared inputs precomputed; the raw inputs are carried along.
    - STANDARD: `A` negated; the host accumulates the inputs.
    """

    LITE = 0
    PREPARED = 1
    STANDARD = 2


@dataclass(frozen=True)
class PackagedProof:
    """Proof in the big-endian host convention.

    Attributes:
        mode (PackagingMode): The packaging mode.
        proof (bytes): A || B || C, where `A` is already negated unless `mode` is LITE.
        public_inputs (tuple[bytes, ...]): The public inputs, 32 bytes each.
        prepared_inputs (bytes | None): gamma_abc[0] + sum_i pub[i] * gamma_abc[i+1] (64 bytes) in PREPARED mode,
            `None` otherwise.
    """

    mode: PackagingMode
    proof: bytes
    public_inputs: tuple[bytes, ...]
    prepared_inputs: bytes | None = None

    @property
    def a_is_negated(self) -> bool:
        return self.mode != PackagingMode.LITE
