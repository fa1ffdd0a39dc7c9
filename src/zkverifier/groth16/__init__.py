"""groth16 package.

This package provides the off-host side of the Groth16 pipeline over BN254.

Modules:
    - qap: Polynomial arithmetic and the R1CS to QAP reduction.
    - key_manager: Circuit-specific trusted setup and explicit key persistence.
    - prover: Proof generation and off-host verification.
    - packager: Negation of `A`, accumulation of public inputs and the lite/prepared/standard packages.
"""
