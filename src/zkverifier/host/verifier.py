"""Groth16 verification on the execution host."""

import logging
from dataclasses import dataclass

from zkverifier.config import DEFAULT_HOST_CONFIG, HostConfig
from zkverifier.data_structures.vk import VerifyingKey
from zkverifier.elliptic_curves.points import (
    g1_from_bytes,
    g1_to_bytes,
    g2_from_bytes,
    g2_to_bytes,
    is_valid_g1,
    is_valid_g2,
    negate_g1_bytes,
)
from zkverifier.errors import (
    ErrorCode,
    FormatError,
    HostAbort,
    InvalidPointError,
    LengthMismatchError,
    PairingFailed,
    PreparedInputsMismatch,
    ZkVerifierError,
)
from zkverifier.fields.field_codec import bytes_to_scalar
from zkverifier.host.syscalls import HostSyscalls
from zkverifier.parameters import G1_SIZE, G2_SIZE, PROOF_SIZE, SCALAR_SIZE
from zkverifier.types.proof_package import PackagedProof, PackagingMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of the verification of a packaged proof.

    Attributes:
        error_code (ErrorCode | None): The reason of the rejection, `None` if the proof was accepted.
        balance_sufficient (bool | None): The result of the balance check, if one was required.
        prepared_inputs (bytes | None): The prepared inputs used in the pairing check, if they were obtained.
    """

    error_code: ErrorCode | None
    balance_sufficient: bool | None = None
    prepared_inputs: bytes | None = None

    @property
    def accepted(self) -> bool:
        return self.error_code is None


class OnChainVerifier:
    """Verify packaged proofs against a fixed verifying key using the host primitives.

    The verification equation is checked as

        e(-A, B) * e(alpha, beta) * e(prepared_inputs, gamma) * e(C, delta) == 1

    with the pairs always passed to the pairing primitive in this order.

    Attributes:
        verifying_key (VerifyingKey): The verifying key.
        config (HostConfig): The host configuration.
    """

    def __init__(self, verifying_key: VerifyingKey, config: HostConfig = DEFAULT_HOST_CONFIG):
        """Initialise the verifier.

        Raises:
            InvalidPointError: If a point of `verifying_key` is not a valid point of its group.
        """
        if not all(is_valid_g1(point) for point in [verifying_key.alpha_g1, *verifying_key.gamma_abc_g1]):
            msg = "Verifying key contains a point which is not on the curve"
            raise InvalidPointError(msg)
        g2_points = [verifying_key.beta_g2, verifying_key.gamma_g2, verifying_key.delta_g2]
        if not all(is_valid_g2(point) for point in g2_points):
            msg = "Verifying key contains a point which is not in G2"
            raise InvalidPointError(msg)

        self.verifying_key = verifying_key
        self.config = config

        self._alpha = g1_to_bytes(verifying_key.alpha_g1)
        self._beta = g2_to_bytes(verifying_key.beta_g2)
        self._gamma = g2_to_bytes(verifying_key.gamma_g2)
        self._delta = g2_to_bytes(verifying_key.delta_g2)
        self._gamma_abc = [g1_to_bytes(point) for point in verifying_key.gamma_abc_g1]

    @property
    def num_public_inputs(self) -> int:
        return self.verifying_key.num_public_inputs

    def verify(
        self, package: PackagedProof, syscalls: HostSyscalls, balance_sufficient: bool | None = None
    ) -> VerificationResult:
        """Verify `package`.

        Every failure of the proof is reported through the error code of the result. A failed proof takes
        precedence over an insufficient balance, whose result is reported in both cases.

        Args:
            package (PackagedProof): The packaged proof.
            syscalls (HostSyscalls): The metered host primitives.
            balance_sufficient (bool | None): The result of the balance check, `None` if the instruction does
                not require one.

        Raises:
            HostAbort: If the host aborts the instruction, e.g., because the compute budget is exhausted.
            Other exceptions raised by a faulty pairing primitive are propagated unchanged.
        """
        prepared_inputs = None
        try:
            prepared_inputs = self._prepare_inputs(package, syscalls)
            self._check_pairing(package, prepared_inputs, syscalls)
        except HostAbort:
            raise
        except ZkVerifierError as err:
            logger.warning("Rejected proof: %s (%s)", err.code.value, err)
            return VerificationResult(err.code, balance_sufficient, prepared_inputs)

        if balance_sufficient is False:
            logger.warning("Rejected %s proof: insufficient balance", package.mode.name)
            return VerificationResult(ErrorCode.INSUFFICIENT_BALANCE, balance_sufficient, prepared_inputs)
        return VerificationResult(None, balance_sufficient, prepared_inputs)

    def _check_shape(self, package: PackagedProof) -> None:
        if not isinstance(package.mode, PackagingMode):
            msg = f"Unknown packaging mode {package.mode}"
            raise FormatError(msg)
        if len(package.proof) != PROOF_SIZE:
            msg = f"Proof must be {PROOF_SIZE} bytes, got {len(package.proof)}"
            raise FormatError(msg)
        if any(len(public_input) != SCALAR_SIZE for public_input in package.public_inputs):
            msg = f"Public inputs must be {SCALAR_SIZE} bytes each"
            raise FormatError(msg)
        if len(package.public_inputs) != self.num_public_inputs:
            msg = f"Expected {self.num_public_inputs} public inputs, got {len(package.public_inputs)}"
            raise LengthMismatchError(msg)
        if (package.prepared_inputs is not None) != (package.mode == PackagingMode.PREPARED):
            msg = f"Prepared inputs must be present if and only if the mode is PREPARED, mode is {package.mode.name}"
            raise FormatError(msg)
        if package.prepared_inputs is not None and len(package.prepared_inputs) != G1_SIZE:
            msg = f"Prepared inputs must be {G1_SIZE} bytes, got {len(package.prepared_inputs)}"
            raise FormatError(msg)

    def _prepare_inputs(self, package: PackagedProof, syscalls: HostSyscalls) -> bytes:
        """Validate the package and return the prepared inputs to use in the pairing check."""
        self._check_shape(package)

        g1_from_bytes(package.proof[:G1_SIZE])
        g2_from_bytes(package.proof[G1_SIZE : G1_SIZE + G2_SIZE])
        g1_from_bytes(package.proof[G1_SIZE + G2_SIZE :])
        for public_input in package.public_inputs:
            bytes_to_scalar(public_input)
        if package.prepared_inputs is not None:
            g1_from_bytes(package.prepared_inputs)

        if package.mode == PackagingMode.PREPARED and self.config.trust_prepared_inputs:
            return package.prepared_inputs

        prepared_inputs = self._gamma_abc[0]
        for public_input, point in zip(package.public_inputs, self._gamma_abc[1:]):
            prepared_inputs = syscalls.addition(prepared_inputs + syscalls.multiplication(point + public_input))

        if package.mode == PackagingMode.PREPARED and prepared_inputs != package.prepared_inputs:
            msg = "Submitted prepared inputs do not match the public inputs"
            raise PreparedInputsMismatch(msg)
        return prepared_inputs

    def _check_pairing(self, package: PackagedProof, prepared_inputs: bytes, syscalls: HostSyscalls) -> None:
        a = package.proof[:G1_SIZE]
        b = package.proof[G1_SIZE : G1_SIZE + G2_SIZE]
        c = package.proof[G1_SIZE + G2_SIZE :]
        negated_a = negate_g1_bytes(a) if package.mode == PackagingMode.LITE else a

        pairs = [
            (negated_a, b),
            (self._alpha, self._beta),
            (prepared_inputs, self._gamma),
            (c, self._delta),
        ]
        if not syscalls.pairing(pairs):
            msg = "Pairing check failed"
            raise PairingFailed(msg)
