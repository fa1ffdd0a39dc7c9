import random

import pytest
from py_ecc.optimized_bn128 import G1, add

from zkverifier.circuits.constraint_system import lc
from zkverifier.circuits.threshold import RANGE_BITS, ThresholdCircuit
from zkverifier.data_structures.proof import Proof
from zkverifier.errors import ConstraintUnsatisfiedError, FormatError, LengthMismatchError
from zkverifier.groth16.key_manager import KeyManager
from zkverifier.groth16.prover import ProofBuilder, verify_proof
from zkverifier.parameters import r


class SquareCircuit:
    """x * x = y, with y public."""

    def __init__(self, x=None, y=None):
        self.x = x
        self.y = y

    def generate_constraints(self, cs):
        y = cs.new_input_variable(self.y)
        x = cs.new_witness_variable(self.x)
        cs.enforce_constraint(lc(x), lc(x), lc(y))


def test_proof_verifies_off_host(verifying_key, proof, public_inputs):
    assert verify_proof(verifying_key, proof, public_inputs)


@pytest.mark.parametrize("public_inputs", [[41], [0], [2**32 - 1]])
def test_proof_does_not_verify_with_other_public_inputs(verifying_key, proof, public_inputs):
    assert not verify_proof(verifying_key, proof, public_inputs)


def test_tampered_proof_does_not_verify(verifying_key, proof, public_inputs):
    tampered = Proof(a=proof.a, b=proof.b, c=add(proof.c, G1))

    assert not verify_proof(verifying_key, tampered, public_inputs)


def test_public_inputs(circuit):
    assert ProofBuilder.public_inputs(circuit) == circuit.public_inputs() == [40]


def test_prove_rejects_unsatisfied_witness(proving_key):
    with pytest.raises(ConstraintUnsatisfiedError) as exc_info:
        ProofBuilder(proving_key).prove(
            ThresholdCircuit(secret=39, threshold=40), rng=random.Random(1), allow_insecure=True
        )
    assert exc_info.value.constraint_index == RANGE_BITS + 1


def test_prove_rejects_circuits_of_another_shape(proving_key):
    with pytest.raises(LengthMismatchError):
        ProofBuilder(proving_key).prove(SquareCircuit(x=3, y=9), rng=random.Random(1), allow_insecure=True)


def test_verify_rejects_wrong_number_of_public_inputs(verifying_key, proof):
    with pytest.raises(LengthMismatchError):
        verify_proof(verifying_key, proof, [40, 1])


def test_verify_rejects_non_canonical_public_inputs(verifying_key, proof):
    with pytest.raises(FormatError):
        verify_proof(verifying_key, proof, [r + 40])


def test_proofs_are_randomised(proving_key, proof, circuit, verifying_key):
    other = ProofBuilder(proving_key).prove(circuit, rng=random.Random(8), allow_insecure=True)

    assert other != proof
    assert verify_proof(verifying_key, other, circuit.public_inputs())


def test_proof_serialisation(proof):
    assert Proof.from_bytes(proof.to_bytes()) == proof
    assert Proof.from_bytes(proof.to_bytes("big"), "big") == proof
    with pytest.raises(FormatError):
        Proof.from_bytes(proof.to_bytes()[:-1])


def test_square_circuit_end_to_end():
    proving_key, verifying_key = KeyManager.setup(SquareCircuit(), rng=random.Random(3), allow_insecure=True)
    proof = ProofBuilder(proving_key).prove(SquareCircuit(x=3, y=9), rng=random.Random(4), allow_insecure=True)

    assert verify_proof(verifying_key, proof, [9])
    assert not verify_proof(verifying_key, proof, [4])