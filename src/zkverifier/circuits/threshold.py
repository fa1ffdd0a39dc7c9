"""Circuit proving that a secret value is at least a public threshold."""

from zkverifier.circuits.constraint_system import ONE, ConstraintSystem, lc
from zkverifier.parameters import r

RANGE_BITS = 32


class ThresholdCircuit:
    r"""Circuit for the statement `secret >= threshold`.

    The circuit computes d = secret - threshold and decomposes d into `RANGE_BITS` boolean variables. The
    decomposition exists if and only if 0 <= d < 2^RANGE_BITS, which proves `secret >= threshold` for values in
    [0, 2^RANGE_BITS).

    Constraints:
        - (secret - threshold) * 1 = d
        - bit_i * bit_i = bit_i                         for i in [0, RANGE_BITS)
        - (\sum_i 2^i * bit_i) * 1 = d

    Public inputs: [threshold]. Witness: secret.

    Attributes:
        secret (int | None): The private value. `None` when the circuit is only used for its shape.
        threshold (int | None): The public threshold. `None` when the circuit is only used for its shape.
    """

    def __init__(self, secret: int | None = None, threshold: int | None = None):
        """Initialise the circuit.

        Args:
            secret (int | None): The private value, in [0, 2^32).
            threshold (int | None): The public threshold, in [0, 2^32).

        Raises:
            ValueError: If one of the values is outside [0, 2^32).
        """
        for value in (secret, threshold):
            if value is not None and not 0 <= value < 1 << RANGE_BITS:
                msg = f"Value {value} is outside the range [0, 2^{RANGE_BITS})"
                raise ValueError(msg)
        self.secret = secret
        self.threshold = threshold

    def public_inputs(self) -> list[int]:
        """Return the public inputs of the circuit.

        Raises:
            ValueError: If the threshold is not assigned.
        """
        if self.threshold is None:
            msg = "Missing assignment"
            raise ValueError(msg)
        return [self.threshold]

    def generate_constraints(self, cs: ConstraintSystem) -> None:
        threshold = cs.new_input_variable(self.threshold)
        secret = cs.new_witness_variable(self.secret)

        d_value = None
        if self.secret is not None and self.threshold is not None:
            d_value = (self.secret - self.threshold) % r
        d = cs.new_witness_variable(d_value)
        cs.enforce_constraint(lc(secret, (-1, threshold)), lc(ONE), lc(d))

        bits = []
        for i in range(RANGE_BITS):
            bit = cs.new_witness_variable(None if d_value is None else (d_value >> i) & 1)
            cs.enforce_constraint(lc(bit), lc(bit), lc(bit))
            bits.append((1 << i, bit))
        cs.enforce_constraint(lc(*bits), lc(ONE), lc(d))
