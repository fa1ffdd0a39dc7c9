"""Compute-unit metering of one instruction."""

import logging

from zkverifier.errors import ComputeBudgetExceeded

logger = logging.getLogger(__name__)


class ComputeMeter:
    """Track the compute units consumed by an instruction against its limit.

    Attributes:
        limit (int): The compute units available.
        consumed (int): The compute units consumed so far.
    """

    def __init__(self, limit: int):
        self.limit = limit
        self.consumed = 0

    @property
    def remaining(self) -> int:
        return self.limit - self.consumed

    def consume(self, units: int, operation: str) -> None:
        """Charge `units` for `operation`.

        Raises:
            ComputeBudgetExceeded: If the charge exceeds the remaining budget. Nothing is charged in that case.
        """
        if units > self.remaining:
            msg = f"{operation} needs {units} compute units, {self.remaining} of {self.limit} remaining"
            raise ComputeBudgetExceeded(msg)
        self.consumed += units
        logger.debug("%s consumed %d compute units (%d/%d)", operation, units, self.consumed, self.limit)
