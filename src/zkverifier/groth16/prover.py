"""Groth16 proof generation and off-host verification."""

import logging
from random import Random

from py_ecc.optimized_bn128 import add, multiply, neg

from zkverifier.circuits.constraint_system import Circuit, synthesize
from zkverifier.data_structures.pk import ProvingKey
from zkverifier.data_structures.proof import Proof
from zkverifier.data_structures.vk import VerifyingKey
from zkverifier.elliptic_curves.pairing import pairing_product_is_one
from zkverifier.elliptic_curves.points import G1_INFINITY, G2_INFINITY, is_valid_g1, is_valid_g2
from zkverifier.errors import InvalidPointError, LengthMismatchError
from zkverifier.groth16.key_manager import check_randomness_source, random_scalar
from zkverifier.groth16.packager import negate_a, prepare_inputs
from zkverifier.groth16.qap import Qap
from zkverifier.parameters import r

logger = logging.getLogger(__name__)


def msm(bases: list, scalars: list[int], infinity):
    r"""Compute \sum_i scalars[i] * bases[i]."""
    assert len(bases) == len(scalars)
    out = infinity
    for base, scalar in zip(bases, scalars):
        if scalar % r:
            out = add(out, multiply(base, scalar % r))
    return out


class ProofBuilder:
    """Generate Groth16 proofs for a fixed proving key.

    Attributes:
        proving_key (ProvingKey): The key produced by `KeyManager.setup` for the circuit.
    """

    def __init__(self, proving_key: ProvingKey):
        self.proving_key = proving_key

    def validate_circuit(self, circuit: Circuit) -> Qap:
        """Check that `circuit` has the shape the proving key was generated for.

        Raises:
            LengthMismatchError: If the number of variables or constraints differs from the key.
        """
        qap = Qap(synthesize(circuit))
        pk = self.proving_key
        if qap.num_instance_variables != pk.num_instance_variables:
            msg = (
                f"Number of public inputs doesn't match circuit: expected {pk.num_instance_variables - 1}, "
                f"got {qap.num_instance_variables - 1}"
            )
            raise LengthMismatchError(msg)
        if len(pk.a_query) != qap.num_variables or pk.domain_size != qap.domain_size:
            msg = "Proving key was not generated for this circuit"
            raise LengthMismatchError(msg)
        return qap

    def prove(self, circuit: Circuit, rng: Random | None = None, allow_insecure: bool = False) -> Proof:
        """Generate a proof for the assignment carried by `circuit`.

        Args:
            circuit (Circuit): The circuit, with all the values assigned.
            rng (Random | None): Source of the blinding scalars r and s. Defaults to `secrets.SystemRandom()`.
            allow_insecure (bool): Accept a source which is not cryptographically secure.

        Returns:
            The proof (A, B, C).

        Raises:
            ConstraintUnsatisfiedError: If the witness does not satisfy the constraints.
            LengthMismatchError: If the circuit does not match the proving key.
            ValueError: If `rng` is not cryptographically secure and `allow_insecure` is not set.
        """
        rng = check_randomness_source(rng, allow_insecure)
        cs = synthesize(circuit)
        cs.check_satisfied()
        qap = self.validate_circuit(circuit)
        z = cs.full_assignment()
        h = qap.quotient_polynomial(z)

        pk = self.proving_key
        blinding_r, blinding_s = random_scalar(rng), random_scalar(rng)
        n_instance = pk.num_instance_variables

        # A = alpha + sum_i z_i * u_i(tau) + r * delta
        a = add(pk.vk.alpha_g1, msm(pk.a_query, z, G1_INFINITY))
        a = add(a, multiply(pk.delta_g1, blinding_r))
        # B = beta + sum_i z_i * v_i(tau) + s * delta, in G2 and in G1
        b = add(pk.vk.beta_g2, msm(pk.b_g2_query, z, G2_INFINITY))
        b = add(b, multiply(pk.vk.delta_g2, blinding_s))
        b_g1 = add(pk.beta_g1, msm(pk.b_g1_query, z, G1_INFINITY))
        b_g1 = add(b_g1, multiply(pk.delta_g1, blinding_s))
        # C = sum_witness z_i * l_i + h(tau) * Z(tau) / delta + s * A + r * B - r * s * delta
        c = add(msm(pk.l_query, z[n_instance:], G1_INFINITY), msm(pk.h_query, h, G1_INFINITY))
        c = add(c, multiply(a, blinding_s))
        c = add(c, multiply(b_g1, blinding_r))
        c = add(c, neg(multiply(pk.delta_g1, blinding_r * blinding_s % r)))

        logger.debug("Generated proof for %d constraints", cs.num_constraints)
        return Proof(a=a, b=b, c=c)

    @staticmethod
    def public_inputs(circuit: Circuit) -> list[int]:
        """Return the public inputs assigned in `circuit`, in allocation order."""
        cs = synthesize(circuit)
        inputs = cs.instance_assignment[1:]
        if any(value is None for value in inputs):
            msg = "Missing assignment"
            raise ValueError(msg)
        return inputs


def verify_proof(verifying_key: VerifyingKey, proof: Proof, public_inputs: list[int]) -> bool:
    """Verify a proof off the host, directly on decoded points.

    Raises:
        InvalidPointError: If a component of the proof is not a valid point.
        LengthMismatchError: If the number of public inputs does not match the key.
    """
    if not (is_valid_g2(proof.b) and is_valid_g1(proof.c)):
        msg = "Proof component is not a valid point"
        raise InvalidPointError(msg)
    prepared = prepare_inputs(verifying_key, public_inputs)
    return pairing_product_is_one(
        [
            (negate_a(proof.a), proof.b),
            (verifying_key.alpha_g1, verifying_key.beta_g2),
            (prepared, verifying_key.gamma_g2),
            (proof.c, verifying_key.delta_g2),
        ]
    )
