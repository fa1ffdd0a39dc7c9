"""data_structures package.

Modules:
    - proof: The Groth16 proof triple (A, B, C).
    - vk: The Groth16 verifying key.
    - pk: The Groth16 proving key.
"""
