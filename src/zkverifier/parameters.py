"""Parameters of the BN254 (alt_bn128) curve and of its byte encodings."""

from py_ecc.optimized_bn128 import curve_order, field_modulus

# Modulus of the base field Fq
q = field_modulus
# Order of G1, G2 and GT (modulus of the scalar field Fr)
r = curve_order

FIELD_ELEMENT_SIZE = 32
# x || y
G1_SIZE = 2 * FIELD_ELEMENT_SIZE
# x.c0 || x.c1 || y.c0 || y.c1
G2_SIZE = 4 * FIELD_ELEMENT_SIZE
# A || B || C
PROOF_SIZE = 2 * G1_SIZE + G2_SIZE
SCALAR_SIZE = FIELD_ELEMENT_SIZE
