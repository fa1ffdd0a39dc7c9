import random

import pytest

from zkverifier.circuits.threshold import ThresholdCircuit
from zkverifier.groth16.key_manager import KeyManager
from zkverifier.groth16.packager import ProofPackager
from zkverifier.groth16.prover import ProofBuilder

SECRET = 42
THRESHOLD = 40


@pytest.fixture(scope="session")
def circuit():
    return ThresholdCircuit(secret=SECRET, threshold=THRESHOLD)


@pytest.fixture(scope="session")
def keys():
    return KeyManager.setup(ThresholdCircuit(), rng=random.Random(42), allow_insecure=True)


@pytest.fixture(scope="session")
def proving_key(keys):
    return keys[0]


@pytest.fixture(scope="session")
def verifying_key(keys):
    return keys[1]


@pytest.fixture(scope="session")
def proof(proving_key, circuit):
    return ProofBuilder(proving_key).prove(circuit, rng=random.Random(7), allow_insecure=True)


@pytest.fixture(scope="session")
def public_inputs(circuit):
    return circuit.public_inputs()


@pytest.fixture(scope="session")
def packager(verifying_key):
    return ProofPackager(verifying_key)
