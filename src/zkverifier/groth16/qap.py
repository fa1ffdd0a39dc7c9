"""Polynomial arithmetic over Fr and reduction of a rank-1 constraint system to a QAP.

Polynomials are lists of coefficients in Fr, lowest degree first. The evaluation domain of a QAP with N rows is
{1, 2, ..., N}: row k of the constraint matrices is interpolated at the point k + 1.
"""

from zkverifier.circuits.constraint_system import ConstraintSystem
from zkverifier.parameters import r


def add_polys(a: list[int], b: list[int]) -> list[int]:
    out = [0] * max(len(a), len(b))
    for i, coefficient in enumerate(a):
        out[i] = coefficient
    for i, coefficient in enumerate(b):
        out[i] = (out[i] + coefficient) % r
    return out


def subtract_polys(a: list[int], b: list[int]) -> list[int]:
    return add_polys(a, [-coefficient % r for coefficient in b])


def multiply_polys(a: list[int], b: list[int]) -> list[int]:
    if not a or not b:
        return []
    out = [0] * (len(a) + len(b) - 1)
    for i, x in enumerate(a):
        if x == 0:
            continue
        for j, y in enumerate(b):
            out[i + j] = (out[i + j] + x * y) % r
    return out


def divide_polys(a: list[int], b: list[int]) -> tuple[list[int], list[int]]:
    """Divide `a` by `b`, whose leading coefficient must be non-zero.

    Returns:
        The quotient and the remainder.
    """
    assert b and b[-1] % r != 0, "Division by the zero polynomial"
    remainder = [coefficient % r for coefficient in a]
    if len(remainder) < len(b):
        return [], remainder
    quotient = [0] * (len(remainder) - len(b) + 1)
    inverse_leading = pow(b[-1], -1, r)
    for position in range(len(quotient) - 1, -1, -1):
        factor = remainder[position + len(b) - 1] * inverse_leading % r
        quotient[position] = factor
        for j, coefficient in enumerate(b):
            remainder[position + j] = (remainder[position + j] - factor * coefficient) % r
    return quotient, remainder[: len(b) - 1]


def eval_poly(poly: list[int], x: int) -> int:
    """Evaluate `poly` at `x` with Horner's rule."""
    out = 0
    for coefficient in reversed(poly):
        out = (out * x + coefficient) % r
    return out


class Qap:
    """Quadratic arithmetic program of a constraint system.

    The rows of the QAP are the constraints of the system followed by one row z_i * 0 = 0 per instance variable,
    which makes the polynomials of the public inputs linearly independent.

    Attributes:
        a_rows (list[dict[int, int]]): Sparse rows of the matrix A.
        b_rows (list[dict[int, int]]): Sparse rows of the matrix B.
        c_rows (list[dict[int, int]]): Sparse rows of the matrix C.
        num_variables (int): Number of columns.
        num_instance_variables (int): Number of instance variables, including the constant `ONE`.
    """

    def __init__(self, cs: ConstraintSystem):
        """Reduce the constraint system `cs` to a QAP."""
        a_rows, b_rows, c_rows = cs.to_matrices()
        for i in range(cs.num_instance_variables):
            a_rows.append({i: 1})
            b_rows.append({})
            c_rows.append({})
        self.a_rows = a_rows
        self.b_rows = b_rows
        self.c_rows = c_rows
        self.num_variables = cs.num_variables
        self.num_instance_variables = cs.num_instance_variables

    @property
    def domain_size(self) -> int:
        return len(self.a_rows)

    @property
    def domain(self) -> list[int]:
        return list(range(1, self.domain_size + 1))

    def vanishing_polynomial(self) -> list[int]:
        """Z(x) = prod_k (x - x_k)."""
        out = [1]
        for point in self.domain:
            out = multiply_polys(out, [-point % r, 1])
        return out

    def _barycentric_denominators(self) -> list[int]:
        """d_k = prod_{j != k} (x_k - x_j)."""
        domain = self.domain
        out = []
        for k, x_k in enumerate(domain):
            d = 1
            for j, x_j in enumerate(domain):
                if j != k:
                    d = d * (x_k - x_j) % r
            out.append(d)
        return out

    def lagrange_basis_at(self, tau: int) -> list[int]:
        """Evaluate every Lagrange basis polynomial of the domain at `tau`.

        `tau` must not belong to the domain.
        """
        assert tau % r not in self.domain, "tau belongs to the evaluation domain"
        z_tau = eval_poly(self.vanishing_polynomial(), tau)
        return [
            z_tau * pow((tau - x_k) * d_k % r, -1, r) % r
            for x_k, d_k in zip(self.domain, self._barycentric_denominators())
        ]

    def evaluate_columns_at(self, tau: int) -> tuple[list[int], list[int], list[int]]:
        """Evaluate the polynomials u_i, v_i, w_i of every variable i at `tau`."""
        basis = self.lagrange_basis_at(tau)
        out = ([0] * self.num_variables, [0] * self.num_variables, [0] * self.num_variables)
        for rows, evaluations in zip((self.a_rows, self.b_rows, self.c_rows), out):
            for row, basis_value in zip(rows, basis):
                for column, coefficient in row.items():
                    evaluations[column] = (evaluations[column] + coefficient * basis_value) % r
        return out

    def interpolate(self, evaluations: list[int]) -> list[int]:
        """Return the coefficients of the polynomial of degree < N taking `evaluations` on the domain."""
        vanishing = self.vanishing_polynomial()
        out = [0] * self.domain_size
        for x_k, d_k, value in zip(self.domain, self._barycentric_denominators(), evaluations):
            if value == 0:
                continue
            numerator, _ = divide_polys(vanishing, [-x_k % r, 1])
            scale = value * pow(d_k, -1, r) % r
            out = add_polys(out, [coefficient * scale % r for coefficient in numerator])
        return out

    def quotient_polynomial(self, z: list[int]) -> list[int]:
        """Compute h(x) = (a(x) * b(x) - c(x)) / Z(x) for the full assignment `z`.

        Raises:
            ValueError: If Z(x) does not divide a(x) * b(x) - c(x), i.e., `z` does not satisfy the constraints.
        """
        a, b, c = (
            self.interpolate([sum(coefficient * z[column] for column, coefficient in row.items()) % r for row in rows])
            for rows in (self.a_rows, self.b_rows, self.c_rows)
        )
        quotient, remainder = divide_polys(subtract_polys(multiply_polys(a, b), c), self.vanishing_polynomial())
        if any(remainder):
            msg = "The assignment does not satisfy the QAP"
            raise ValueError(msg)
        # deg h <= N - 2
        return (quotient + [0] * (self.domain_size - 1))[: self.domain_size - 1]
