"""Execution host: runs verification instructions and commits their records."""

import logging
import time
from collections.abc import Callable

from zkverifier.config import HostConfig
from zkverifier.errors import RecordExistsError
from zkverifier.host.compute_meter import ComputeMeter
from zkverifier.host.instructions import Instruction, VerifyProof, VerifyProofWithBalance, decode_instruction
from zkverifier.host.records import RecordStore, VerificationRecord, VerificationStats
from zkverifier.host.syscalls import HostSyscalls, PairingCheck, alt_bn128_pairing
from zkverifier.host.verifier import OnChainVerifier

logger = logging.getLogger(__name__)


class ExecutionHost:
    """Single-threaded host executing one instruction at a time.

    An instruction either runs to completion and commits exactly one finalised record, or aborts with a
    `HostAbort` and commits nothing.

    Attributes:
        verifier (OnChainVerifier): The verifier, which also carries the host configuration.
        pairing_check (PairingCheck): The pairing primitive.
        clock (Callable[[], float]): The host clock, used to timestamp the verification statistics.
        records (RecordStore): The committed verification records.
        balances (dict[str, int]): The balances of the accounts known to the host.
        stats (VerificationStats): The statistics of the accepted verifications.
    """

    def __init__(
        self,
        verifier: OnChainVerifier,
        pairing_check: PairingCheck = alt_bn128_pairing,
        clock: Callable[[], float] = time.time,
    ):
        self.verifier = verifier
        self.pairing_check = pairing_check
        self.clock = clock
        self.records = RecordStore()
        self.balances: dict[str, int] = {}
        self.stats = VerificationStats()

    @property
    def config(self) -> HostConfig:
        return self.verifier.config

    def set_balance(self, account: str, amount: int) -> None:
        if amount < 0:
            msg = "Balance must be non-negative"
            raise ValueError(msg)
        self.balances[account] = amount

    def balance_of(self, account: str) -> int:
        """Return the balance of `account`. Unknown accounts have balance 0."""
        return self.balances.get(account, 0)

    def process_instruction(self, caller: str, data: bytes) -> VerificationRecord:
        """Decode and execute a serialised instruction.

        Raises:
            FormatError: If `data` is not a valid instruction. Nothing is committed.
            HostAbort: If the instruction is aborted. Nothing is committed.
        """
        return self.execute(caller, decode_instruction(data))

    def execute(self, caller: str, instruction: Instruction) -> VerificationRecord:
        """Execute `instruction` on behalf of `caller`.

        Returns:
            The committed verification record.

        Raises:
            RecordExistsError: If a record for (caller, instruction.index) already exists.
            ComputeBudgetExceeded: If the instruction exceeds the compute budget.
        """
        if (caller, instruction.index) in self.records:
            msg = f"A verification record already exists for {(caller, instruction.index)}"
            raise RecordExistsError(msg)

        meter = ComputeMeter(self.config.compute_unit_limit)
        meter.consume(self.config.instruction_base_cost, "instruction")
        syscalls = HostSyscalls(meter, self.config, self.pairing_check)
        record = VerificationRecord.received(caller, instruction.index)

        match instruction:
            case VerifyProofWithBalance(package=package, balance_threshold=threshold, account=account):
                balance_sufficient = self.balance_of(account) >= threshold
            case VerifyProof(package=package):
                balance_sufficient = None
            case _:
                msg = f"Unknown instruction {instruction!r}"
                raise TypeError(msg)

        result = self.verifier.verify(package, syscalls, balance_sufficient)
        record = record.finalize(result.error_code, result.balance_sufficient, result.prepared_inputs)

        with self.records.transaction() as transaction:
            transaction.put(record)
        if record.accepted:
            self.stats = self.stats.record(record.prepared_inputs, self.clock())

        logger.info(
            "Instruction %s from %s: %s%s (%d compute units)",
            instruction.index,
            caller,
            record.outcome.value,
            f" ({record.error_code.value})" if record.error_code is not None else "",
            meter.consumed,
        )
        return record
