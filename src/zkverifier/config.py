"""Configuration of the execution host."""

from dataclasses import dataclass, fields
from typing import Any, Self


@dataclass(frozen=True)
class HostConfig:
    """Compute budget, syscall costs and verification policy of the execution host.

    The default costs are those charged for the alt_bn128 syscalls by the reference host.

    Attributes:
        compute_unit_limit (int): Compute units available to one instruction.
        instruction_base_cost (int): Units charged when an instruction starts executing.
        addition_cost (int): Units charged per alt_bn128 addition.
        multiplication_cost (int): Units charged per alt_bn128 scalar multiplication.
        pairing_first_pair_cost (int): Units charged for the first pair of a pairing check.
        pairing_other_pair_cost (int): Units charged for every other pair of a pairing check.
        trust_prepared_inputs (bool): If `True`, the prepared inputs of PREPARED packages are used as submitted.
            If `False` (default), they are re-derived from the public inputs and compared.
    """

    compute_unit_limit: int = 200_000
    instruction_base_cost: int = 1_500
    addition_cost: int = 334
    multiplication_cost: int = 3_840
    pairing_first_pair_cost: int = 36_364
    pairing_other_pair_cost: int = 12_121
    trust_prepared_inputs: bool = False

    def pairing_cost(self, n_pairs: int) -> int:
        return self.pairing_first_pair_cost + self.pairing_other_pair_cost * max(n_pairs - 1, 0)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Build a configuration from a mapping, e.g., loaded from a JSON or TOML file.

        Raises:
            ValueError: If `data` contains unknown keys or values of the wrong type.
        """
        known = {field.name: field.type for field in fields(cls)}
        unknown = set(data) - set(known)
        if unknown:
            msg = f"Unknown configuration keys: {sorted(unknown)}"
            raise ValueError(msg)
        for key, value in data.items():
            expected = bool if known[key] in (bool, "bool") else int
            if type(value) is not expected:
                msg = f"{key} must be of type {expected.__name__}, got {type(value).__name__}"
                raise ValueError(msg)
            if expected is int and value < 0:
                msg = f"{key} must be non-negative"
                raise ValueError(msg)
        return cls(**data)


DEFAULT_HOST_CONFIG = HostConfig()
