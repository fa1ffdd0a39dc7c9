"""elliptic_curves package.

This package provides validated (de)serialisation of BN254 curve points and the pairing product check.

Modules:
    - points: Encoding, decoding, validation and negation of G1 and G2 points.
    - pairing: Product-of-pairings check over decoded points.
"""
