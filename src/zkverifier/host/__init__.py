"""host package.

This package models the deterministic, compute-metered execution host that verifies packaged proofs.

Modules:
    - syscalls: The alt_bn128 addition, multiplication and pairing primitives.
    - compute_meter: Compute-unit accounting for one instruction.
    - instructions: Instruction payloads and their binary codec.
    - records: Verification records, the record store and verification statistics.
    - verifier: The on-host Groth16 verifier.
    - runtime: Atomic execution of instructions.
"""
