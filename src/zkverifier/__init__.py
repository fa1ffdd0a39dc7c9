"""zkverifier: A Python package for proving and verifying Groth16 statements over BN254.

The `zkverifier` package generates Groth16 proofs off a constraint circuit and verifies them inside a
resource-metered, deterministic execution host. Proof components are exchanged with the host in a big-endian
byte convention, while keys and proofs are stored in a little-endian convention. The pairing check itself is
delegated to an injected primitive (by default backed by `py_ecc`).

Usage example:
    Prove that a secret value is at least a public threshold and verify the proof on the host:

    >>> from zkverifier.circuits.threshold import ThresholdCircuit
    >>> from zkverifier.groth16.key_manager import KeyManager
    >>> from zkverifier.groth16.prover import ProofBuilder
    >>> from zkverifier.groth16.packager import ProofPackager
    >>> from zkverifier.host.instructions import VerifyProof
    >>> from zkverifier.host.runtime import ExecutionHost
    >>> from zkverifier.host.verifier import OnChainVerifier
    >>> from zkverifier.types.proof_package import PackagingMode
    >>>
    >>> circuit = ThresholdCircuit(secret=42, threshold=40)
    >>> proving_key, verifying_key = KeyManager.setup(ThresholdCircuit())
    >>> proof = ProofBuilder(proving_key).prove(circuit)
    >>> package = ProofPackager(verifying_key).package(proof, circuit.public_inputs(), PackagingMode.LITE)
    >>> host = ExecutionHost(OnChainVerifier(verifying_key))
    >>> host.execute("alice", VerifyProof(package=package, index=0)).accepted
    True
"""
