import pytest

from zkverifier.circuits.constraint_system import ONE, ConstraintSystem, lc, synthesize
from zkverifier.circuits.threshold import RANGE_BITS, ThresholdCircuit
from zkverifier.errors import ConstraintUnsatisfiedError


def test_constraint_system_allocation():
    cs = ConstraintSystem()
    x = cs.new_input_variable(3)
    y = cs.new_witness_variable(9)
    cs.enforce_constraint(lc(x), lc(x), lc(y))

    assert cs.num_instance_variables == 2
    assert cs.num_witness_variables == 1
    assert cs.column(ONE) == 0
    assert cs.column(x) == 1
    assert cs.column(y) == 2
    assert cs.full_assignment() == [1, 3, 9]
    assert cs.is_satisfied()


def test_constraint_system_reports_first_failing_constraint():
    cs = ConstraintSystem()
    x = cs.new_witness_variable(2)
    cs.enforce_constraint(lc(x), lc(ONE), lc((2, ONE)))
    cs.enforce_constraint(lc(x), lc(x), lc((5, ONE)))
    cs.enforce_constraint(lc(x), lc(x), lc((6, ONE)))

    with pytest.raises(ConstraintUnsatisfiedError) as exc_info:
        cs.check_satisfied()
    assert exc_info.value.constraint_index == 1


def test_missing_assignment():
    cs = synthesize(ThresholdCircuit())

    with pytest.raises(ValueError, match="Missing assignment"):
        cs.full_assignment()


def test_threshold_circuit_shape():
    cs = synthesize(ThresholdCircuit())

    assert cs.num_instance_variables == 2
    assert cs.num_witness_variables == RANGE_BITS + 2
    assert cs.num_constraints == RANGE_BITS + 2


@pytest.mark.parametrize(
    ("secret", "threshold"),
    [
        (42, 40),
        (40, 40),
        (2**32 - 1, 0),
        (0, 0),
    ],
)
def test_threshold_circuit_satisfied(secret, threshold):
    circuit = ThresholdCircuit(secret=secret, threshold=threshold)

    assert synthesize(circuit).is_satisfied()
    assert circuit.public_inputs() == [threshold]


@pytest.mark.parametrize(("secret", "threshold"), [(39, 40), (0, 1), (0, 2**32 - 1)])
def test_threshold_circuit_unsatisfied(secret, threshold):
    cs = synthesize(ThresholdCircuit(secret=secret, threshold=threshold))

    with pytest.raises(ConstraintUnsatisfiedError) as exc_info:
        cs.check_satisfied()
    # The decomposition of d = secret - threshold < 0 is the last constraint
    assert exc_info.value.constraint_index == RANGE_BITS + 1


@pytest.mark.parametrize(("secret", "threshold"), [(-1, 0), (0, 2**32), (2**32, 5)])
def test_threshold_circuit_rejects_out_of_range_values(secret, threshold):
    with pytest.raises(ValueError, match="outside the range"):
        ThresholdCircuit(secret=secret, threshold=threshold)
