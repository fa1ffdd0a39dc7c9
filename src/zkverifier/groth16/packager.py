"""Packaging of Groth16 proofs for submission to the execution host."""

import logging

from py_ecc.optimized_bn128 import add, multiply

from zkverifier.data_structures.proof import Proof
from zkverifier.data_structures.vk import VerifyingKey
from zkverifier.elliptic_curves.points import g1_to_bytes, g2_to_bytes, is_valid_g1, negate_g1
from zkverifier.errors import FormatError, InvalidPointError, LengthMismatchError
from zkverifier.fields.field_codec import convert_endianness, scalar_to_bytes
from zkverifier.parameters import r
from zkverifier.types.proof_package import PackagedProof, PackagingMode

logger = logging.getLogger(__name__)


def negate_a(point):
    """Return -A = (x, q - y mod q).

    Raises:
        InvalidPointError: If `point` does not satisfy the curve equation.
    """
    return negate_g1(point)


def prepare_inputs(verifying_key: VerifyingKey, public_inputs: list[int]):
    r"""Accumulate the public inputs into gamma_abc[0] + \sum_i public_inputs[i] * gamma_abc[i+1].

    Args:
        verifying_key (VerifyingKey): The verifying key.
        public_inputs (list[int]): The public inputs, elements of Fr.

    Raises:
        LengthMismatchError: If len(public_inputs) + 1 != len(gamma_abc).
        FormatError: If a public input is not in [0, r).
        InvalidPointError: If a point of gamma_abc is not on the curve.
    """
    gamma_abc = verifying_key.gamma_abc_g1
    if len(public_inputs) + 1 != len(gamma_abc):
        msg = f"Expected {len(gamma_abc) - 1} public inputs, got {len(public_inputs)}"
        raise LengthMismatchError(msg)
    if not all(is_valid_g1(point) for point in gamma_abc):
        msg = "gamma_abc contains a point which is not on the curve"
        raise InvalidPointError(msg)

    out = gamma_abc[0]
    for scalar, point in zip(public_inputs, gamma_abc[1:]):
        if not 0 <= scalar < r:
            msg = "Public input is greater than the field size"
            raise FormatError(msg)
        out = add(out, multiply(point, scalar))
    return out


def to_host_g1(point) -> bytes:
    """Serialise a point of G1 in the host convention."""
    return convert_endianness(g1_to_bytes(point, "little"))


def to_host_g2(point) -> bytes:
    """Serialise a point of G2 in the host convention, converting each Fq component separately."""
    return convert_endianness(g2_to_bytes(point, "little"))


class ProofPackager:
    """Turn proofs into packages in one of the three submission encodings.

    Attributes:
        verifying_key (VerifyingKey): The key the host verifies against.
    """

    def __init__(self, verifying_key: VerifyingKey):
        self.verifying_key = verifying_key

    def negate_a(self, point):
        return negate_a(point)

    def prepare_inputs(self, public_inputs: list[int]):
        return prepare_inputs(self.verifying_key, public_inputs)

    def package(self, proof: Proof, public_inputs: list[int], mode: PackagingMode) -> PackagedProof:
        """Package `proof` for the host.

        Args:
            proof (Proof): The raw proof returned by the prover.
            public_inputs (list[int]): The public inputs the proof was generated for.
            mode (PackagingMode): The packaging mode.

        Raises:
            LengthMismatchError: If the number of public inputs does not match the verifying key.
            InvalidPointError: If `proof.a` is not on the curve.
        """
        # Fail early on inputs the host would reject anyway
        prepared = self.prepare_inputs(public_inputs)
        inputs = tuple(scalar_to_bytes(scalar) for scalar in public_inputs)

        a = proof.a if mode == PackagingMode.LITE else self.negate_a(proof.a)
        proof_bytes = to_host_g1(a) + to_host_g2(proof.b) + to_host_g1(proof.c)

        logger.debug("Packaged proof in %s mode with %d public inputs", mode.name, len(inputs))
        match mode:
            case PackagingMode.PREPARED:
                return PackagedProof(mode, proof_bytes, inputs, to_host_g1(prepared))
            case PackagingMode.LITE | PackagingMode.STANDARD:
                return PackagedProof(mode, proof_bytes, inputs)
            case _:
                msg = f"Unknown packaging mode {mode}"
                raise ValueError(msg)
