"""Product-of-pairings check over BN254."""

from py_ecc.optimized_bn128 import FQ12, final_exponentiate, pairing


def pairing_product_is_one(pairs) -> bool:
    """Check whether the product of the pairings e(P_i, Q_i) is the identity of GT.

    One Miller loop is computed per pair and a single final exponentiation is applied to their product.

    Args:
        pairs: Sequence of (P, Q) with P in G1 and Q in G2. The points must have been validated.

    Returns:
        `True` if prod_i e(P_i, Q_i) == 1, `False` otherwise.
    """
    miller_output = FQ12.one()
    for p, q in pairs:
        miller_output *= pairing(q, p, final_exponentiate=False)
    return final_exponentiate(miller_output) == FQ12.one()
