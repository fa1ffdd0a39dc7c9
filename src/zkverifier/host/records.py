"""Verification records and the host state they are committed to."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from enum import Enum
from typing import Self

from zkverifier.errors import ErrorCode, RecordExistsError, RecordFinalizedError

RecordKey = tuple[str, int]


class Outcome(Enum):
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


@dataclass(frozen=True)
class VerificationRecord:
    """Outcome of one verification instruction.

    A record is created pending when the instruction is received and finalised exactly once.

    Attributes:
        caller (str): The account that submitted the instruction.
        index (int): The index chosen by the caller. Together with `caller`, it identifies the record.
        outcome (Outcome): Pending, accepted or rejected.
        error_code (ErrorCode | None): The reason of the rejection. `None` unless `outcome` is REJECTED.
        balance_sufficient (bool | None): The result of the balance check, `None` if the instruction did not
            require one.
        prepared_inputs (bytes | None): The prepared inputs used in the pairing check (big-endian, 64 bytes).
    """

    caller: str
    index: int
    outcome: Outcome = Outcome.PENDING
    error_code: ErrorCode | None = None
    balance_sufficient: bool | None = None
    prepared_inputs: bytes | None = None

    @classmethod
    def received(cls, caller: str, index: int) -> Self:
        return cls(caller, index)

    @property
    def key(self) -> RecordKey:
        return (self.caller, self.index)

    @property
    def accepted(self) -> bool:
        return self.outcome == Outcome.ACCEPTED

    def finalize(
        self,
        error_code: ErrorCode | None,
        balance_sufficient: bool | None = None,
        prepared_inputs: bytes | None = None,
    ) -> Self:
        """Return the finalised record: accepted if `error_code` is `None`, rejected otherwise.

        Raises:
            RecordFinalizedError: If the record is not pending.
        """
        if self.outcome != Outcome.PENDING:
            msg = f"Record {self.key} is already {self.outcome.value}"
            raise RecordFinalizedError(msg)
        return replace(
            self,
            outcome=Outcome.ACCEPTED if error_code is None else Outcome.REJECTED,
            error_code=error_code,
            balance_sufficient=balance_sufficient,
            prepared_inputs=prepared_inputs,
        )


@dataclass(frozen=True)
class VerificationStats:
    """Running statistics of the accepted verifications.

    Attributes:
        total_verifications (int): Number of accepted verifications.
        last_prepared_inputs (bytes | None): Prepared inputs of the last accepted verification.
        last_timestamp (float | None): Host time of the last accepted verification.
    """

    total_verifications: int = 0
    last_prepared_inputs: bytes | None = None
    last_timestamp: float | None = None

    def record(self, prepared_inputs: bytes | None, timestamp: float) -> Self:
        return replace(
            self,
            total_verifications=self.total_verifications + 1,
            last_prepared_inputs=prepared_inputs,
            last_timestamp=timestamp,
        )


class RecordStore:
    """Write-once store of verification records.

    Writes are only possible inside `transaction`, and are applied when the transaction exits normally.
    """

    def __init__(self):
        self._records: dict[RecordKey, VerificationRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: RecordKey) -> bool:
        return key in self._records

    def get(self, caller: str, index: int) -> VerificationRecord | None:
        return self._records.get((caller, index))

    def records(self) -> list[VerificationRecord]:
        return list(self._records.values())

    @contextmanager
    def transaction(self) -> Iterator["_Transaction"]:
        """Stage writes and apply them all on exit. Nothing is applied if the block raises."""
        staged = _Transaction(self)
        yield staged
        self._records.update(staged.writes)


class _Transaction:
    def __init__(self, store: RecordStore):
        self.store = store
        self.writes: dict[RecordKey, VerificationRecord] = {}

    def put(self, record: VerificationRecord) -> None:
        """Stage `record`.

        Raises:
            RecordExistsError: If a record with the same key is stored or staged.
            RecordFinalizedError: If `record` is still pending.
        """
        if record.key in self.store or record.key in self.writes:
            msg = f"A verification record already exists for {record.key}"
            raise RecordExistsError(msg)
        if record.outcome == Outcome.PENDING:
            msg = f"Record {record.key} must be finalised before being stored"
            raise RecordFinalizedError(msg)
        self.writes[record.key] = record
