"""Errors raised while proving, packaging and verifying Groth16 proofs.

Every error carries an `ErrorCode`. The verifier turns the codes of local failures into rejected verification
records, while `HostAbort` errors abort the whole instruction without writing any state.
"""

from enum import Enum


class ErrorCode(Enum):
    """Codes reported by the verification pipeline."""

    FORMAT_ERROR = "FormatError"
    INVALID_POINT = "InvalidPointError"
    LENGTH_MISMATCH = "LengthMismatchError"
    PAIRING_FAILED = "PairingFailed"
    CONSTRAINT_UNSATISFIED = "ConstraintUnsatisfiedError"
    INSUFFICIENT_BALANCE = "InsufficientBalance"
    PREPARED_INPUTS_MISMATCH = "PreparedInputsMismatch"
    COMPUTE_BUDGET_EXCEEDED = "ComputeBudgetExceeded"
    RECORD_EXISTS = "RecordExists"
    RECORD_FINALIZED = "RecordFinalized"


class ZkVerifierError(Exception):
    """Base class of all the errors raised by the package."""

    code: ErrorCode


class FormatError(ZkVerifierError, ValueError):
    """Malformed length or width, detected before any arithmetic."""

    code = ErrorCode.FORMAT_ERROR


class InvalidPointError(ZkVerifierError, ValueError):
    """Coordinates that do not describe a point of the expected group."""

    code = ErrorCode.INVALID_POINT


class AltBn128Error(InvalidPointError):
    """Malformed input to one of the alt_bn128 primitives."""


class LengthMismatchError(ZkVerifierError, ValueError):
    """Number of public inputs, or shape of a circuit, incompatible with a key."""

    code = ErrorCode.LENGTH_MISMATCH


class PairingFailed(ZkVerifierError):
    """The pairing check returned `False`: the statement is false, the input was well formed."""

    code = ErrorCode.PAIRING_FAILED


class ConstraintUnsatisfiedError(ZkVerifierError):
    """The witness does not satisfy the constraints of the circuit."""

    code = ErrorCode.CONSTRAINT_UNSATISFIED

    def __init__(self, constraint_index: int):
        super().__init__(f"Constraint {constraint_index} is not satisfied by the witness")
        self.constraint_index = constraint_index


class InsufficientBalance(ZkVerifierError):
    """The balance of the checked account is below the required threshold."""

    code = ErrorCode.INSUFFICIENT_BALANCE


class PreparedInputsMismatch(ZkVerifierError):
    """The submitted prepared inputs do not match the ones derived from the public inputs."""

    code = ErrorCode.PREPARED_INPUTS_MISMATCH


class HostAbort(ZkVerifierError):
    """Fatal error of the execution host. The instruction is aborted and no state is written."""


class ComputeBudgetExceeded(HostAbort):
    """The instruction consumed more compute units than its budget."""

    code = ErrorCode.COMPUTE_BUDGET_EXCEEDED


class RecordExistsError(HostAbort):
    """A verification record already exists for the requested key."""

    code = ErrorCode.RECORD_EXISTS


class RecordFinalizedError(ZkVerifierError):
    """Attempt to finalise a verification record that is no longer pending."""

    code = ErrorCode.RECORD_FINALIZED
