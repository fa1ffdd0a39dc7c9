"""Minimal rank-1 constraint system over the scalar field of BN254.

A constraint system holds instance variables (the constant `ONE` followed by the public inputs) and witness
variables, together with constraints <a, z> * <b, z> = <c, z>, where `a`, `b`, `c` are linear combinations
and `z` is the full assignment.
"""

from dataclasses import dataclass
from typing import Protocol

from zkverifier.errors import ConstraintUnsatisfiedError
from zkverifier.parameters import r

INSTANCE = "instance"
WITNESS = "witness"


@dataclass(frozen=True)
class Variable:
    """Variable of a constraint system.

    Attributes:
        kind (str): Either `INSTANCE` or `WITNESS`.
        index (int): Position of the variable among the variables of the same kind.
    """

    kind: str
    index: int


ONE = Variable(INSTANCE, 0)

LinearCombination = dict[Variable, int]


def lc(*terms: tuple[int, Variable] | Variable) -> LinearCombination:
    """Build a linear combination from variables and (coefficient, variable) pairs."""
    out: LinearCombination = {}
    for term in terms:
        coefficient, variable = (1, term) if isinstance(term, Variable) else term
        out[variable] = (out.get(variable, 0) + coefficient) % r
    return out


class Circuit(Protocol):
    """A circuit is anything that can synthesise its constraints into a constraint system."""

    def generate_constraints(self, cs: "ConstraintSystem") -> None: ...


class ConstraintSystem:
    """Rank-1 constraint system.

    In setup mode the system only records the shape of the circuit and the values of the variables are `None`.
    """

    def __init__(self):
        """Initialise an empty constraint system containing only the constant variable `ONE`."""
        self.instance_assignment: list[int | None] = [1]
        self.witness_assignment: list[int | None] = []
        self.constraints: list[tuple[LinearCombination, LinearCombination, LinearCombination]] = []

    @property
    def num_instance_variables(self) -> int:
        """Number of instance variables, including `ONE`."""
        return len(self.instance_assignment)

    @property
    def num_witness_variables(self) -> int:
        return len(self.witness_assignment)

    @property
    def num_variables(self) -> int:
        return self.num_instance_variables + self.num_witness_variables

    @property
    def num_constraints(self) -> int:
        return len(self.constraints)

    def new_input_variable(self, value: int | None) -> Variable:
        """Allocate a public input."""
        self.instance_assignment.append(None if value is None else value % r)
        return Variable(INSTANCE, self.num_instance_variables - 1)

    def new_witness_variable(self, value: int | None) -> Variable:
        """Allocate a private variable."""
        self.witness_assignment.append(None if value is None else value % r)
        return Variable(WITNESS, self.num_witness_variables - 1)

    def enforce_constraint(self, a: LinearCombination, b: LinearCombination, c: LinearCombination) -> None:
        """Add the constraint <a, z> * <b, z> = <c, z>."""
        self.constraints.append((a, b, c))

    def column(self, variable: Variable) -> int:
        """Position of `variable` in the full assignment z = (instance || witness)."""
        return variable.index if variable.kind == INSTANCE else self.num_instance_variables + variable.index

    def full_assignment(self) -> list[int]:
        """Return z = (instance || witness).

        Raises:
            ValueError: If some variable has no value, i.e., the system was synthesised in setup mode.
        """
        z = self.instance_assignment + self.witness_assignment
        if any(value is None for value in z):
            msg = "Missing assignment"
            raise ValueError(msg)
        return z

    def evaluate(self, combination: LinearCombination, z: list[int]) -> int:
        """Evaluate a linear combination at the assignment `z`."""
        return sum(coefficient * z[self.column(variable)] for variable, coefficient in combination.items()) % r

    def check_satisfied(self) -> None:
        """Check that the assignment satisfies every constraint.

        Raises:
            ConstraintUnsatisfiedError: With the index of the first constraint which is not satisfied.
        """
        z = self.full_assignment()
        for i, (a, b, c) in enumerate(self.constraints):
            if self.evaluate(a, z) * self.evaluate(b, z) % r != self.evaluate(c, z):
                raise ConstraintUnsatisfiedError(i)

    def is_satisfied(self) -> bool:
        try:
            self.check_satisfied()
        except ConstraintUnsatisfiedError:
            return False
        return True

    def to_matrices(self) -> tuple[list[dict[int, int]], list[dict[int, int]], list[dict[int, int]]]:
        """Return the sparse rows of the matrices A, B, C indexed by the columns of the full assignment."""
        matrices = ([], [], [])
        for constraint in self.constraints:
            for matrix, combination in zip(matrices, constraint):
                matrix.append({self.column(variable): coefficient for variable, coefficient in combination.items()})
        return matrices


def synthesize(circuit: Circuit) -> ConstraintSystem:
    """Synthesise the constraints of `circuit` into a fresh constraint system."""
    cs = ConstraintSystem()
    circuit.generate_constraints(cs)
    return cs
