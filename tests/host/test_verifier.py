from dataclasses import replace

import pytest
from py_ecc.optimized_bn128 import FQ, G1

from zkverifier.config import HostConfig
from zkverifier.data_structures.vk import VerifyingKey
from zkverifier.elliptic_curves.points import g1_to_bytes, g2_to_bytes, negate_g1_bytes
from zkverifier.errors import AltBn128Error, ComputeBudgetExceeded, ErrorCode, InvalidPointError
from zkverifier.fields.field_codec import scalar_to_bytes
from zkverifier.groth16.packager import prepare_inputs
from zkverifier.host.compute_meter import ComputeMeter
from zkverifier.host.syscalls import HostSyscalls, alt_bn128_pairing
from zkverifier.host.verifier import OnChainVerifier
from zkverifier.parameters import r
from zkverifier.types.proof_package import PackagingMode

MODES = list(PackagingMode)
PROOF_FAILURES = {ErrorCode.INVALID_POINT, ErrorCode.PAIRING_FAILED}


@pytest.fixture(scope="module")
def verifier(verifying_key):
    return OnChainVerifier(verifying_key)


@pytest.fixture(scope="module")
def packages(packager, proof, public_inputs):
    return {mode: packager.package(proof, public_inputs, mode) for mode in MODES}


def run(verifier, package, pairing_check=alt_bn128_pairing, balance_sufficient=None):
    config = verifier.config
    syscalls = HostSyscalls(ComputeMeter(config.compute_unit_limit), config, pairing_check)
    return verifier.verify(package, syscalls, balance_sufficient)


def flip(data: bytes, position: int) -> bytes:
    out = bytearray(data)
    out[position] ^= 0xFF
    return bytes(out)


@pytest.mark.parametrize("mode", MODES)
def test_valid_proofs_are_accepted(verifier, packages, verifying_key, public_inputs, mode):
    result = run(verifier, packages[mode])

    assert result.accepted
    assert result.error_code is None
    assert result.balance_sufficient is None
    assert result.prepared_inputs == g1_to_bytes(prepare_inputs(verifying_key, public_inputs))


@pytest.mark.parametrize("mode", MODES)
def test_verification_is_deterministic(verifier, packages, mode):
    assert run(verifier, packages[mode]) == run(verifier, packages[mode])


@pytest.mark.parametrize("mode", MODES)
@pytest.mark.parametrize(
    "position",
    [
        0,  # A.x
        63,  # A.y
        64,  # B.x.c0
        191,  # B.y.c1
        192,  # C.x
        255,  # C.y
    ],
)
def test_mutated_proofs_are_rejected(verifier, packages, mode, position):
    package = packages[mode]

    result = run(verifier, replace(package, proof=flip(package.proof, position)))

    assert not result.accepted
    assert result.error_code in PROOF_FAILURES


def test_single_byte_mutations_never_verify(verifier, packages):
    package = packages[PackagingMode.LITE]

    for position in range(0, 256, 9):
        result = run(verifier, replace(package, proof=flip(package.proof, position)))
        assert result.error_code in PROOF_FAILURES, position


@pytest.mark.parametrize("mode", MODES)
def test_flipping_the_first_byte_of_c_is_an_invalid_point(verifier, packages, mode):
    package = packages[mode]

    result = run(verifier, replace(package, proof=flip(package.proof, 192)))

    assert result.error_code == ErrorCode.INVALID_POINT


@pytest.mark.parametrize("mode", MODES)
def test_wrong_public_inputs_fail_the_pairing(verifier, packager, proof, mode):
    package = packager.package(proof, [41], mode)

    result = run(verifier, package)

    assert result.error_code == ErrorCode.PAIRING_FAILED


@pytest.mark.parametrize("mode", MODES)
def test_lite_and_negated_a_are_not_interchangeable(verifier, packages, mode):
    package = packages[mode]
    wrong_mode = PackagingMode.STANDARD if mode == PackagingMode.LITE else PackagingMode.LITE

    result = run(verifier, replace(package, mode=wrong_mode, prepared_inputs=None))

    assert result.error_code == ErrorCode.PAIRING_FAILED


def test_prepared_inputs_are_checked(verifier, packages):
    package = replace(packages[PackagingMode.PREPARED], prepared_inputs=g1_to_bytes(G1))

    result = run(verifier, package)

    assert result.error_code == ErrorCode.PREPARED_INPUTS_MISMATCH


def test_trusted_prepared_inputs_are_used_as_submitted(verifying_key, packages):
    verifier = OnChainVerifier(verifying_key, HostConfig(trust_prepared_inputs=True))
    package = packages[PackagingMode.PREPARED]

    assert run(verifier, package).accepted
    assert run(verifier, replace(package, prepared_inputs=g1_to_bytes(G1))).error_code == ErrorCode.PAIRING_FAILED


def test_trusted_prepared_inputs_skip_the_accumulation(verifying_key, packages):
    verifier = OnChainVerifier(verifying_key, HostConfig(trust_prepared_inputs=True))
    meter = ComputeMeter(verifier.config.compute_unit_limit)

    verifier.verify(packages[PackagingMode.PREPARED], HostSyscalls(meter, verifier.config))

    assert meter.consumed == verifier.config.pairing_cost(4)


@pytest.mark.parametrize(
    ("mutate", "error_code"),
    [
        (lambda p: replace(p, proof=p.proof[:-1]), ErrorCode.FORMAT_ERROR),
        (lambda p: replace(p, proof=p.proof + b"\x00"), ErrorCode.FORMAT_ERROR),
        (lambda p: replace(p, public_inputs=(p.public_inputs[0][1:],)), ErrorCode.FORMAT_ERROR),
        (lambda p: replace(p, public_inputs=(scalar_to_bytes(40),) * 2), ErrorCode.LENGTH_MISMATCH),
        (lambda p: replace(p, public_inputs=()), ErrorCode.LENGTH_MISMATCH),
        (lambda p: replace(p, public_inputs=(r.to_bytes(32, "big"),)), ErrorCode.FORMAT_ERROR),
        (lambda p: replace(p, public_inputs=((r + 40).to_bytes(32, "big"),)), ErrorCode.FORMAT_ERROR),
        (lambda p: replace(p, prepared_inputs=g1_to_bytes(G1)), ErrorCode.FORMAT_ERROR),
        (lambda p: replace(p, mode=7), ErrorCode.FORMAT_ERROR),
    ],
)
def test_malformed_packages_are_rejected(verifier, packages, mutate, error_code):
    result = run(verifier, mutate(packages[PackagingMode.STANDARD]))

    assert result.error_code == error_code
    assert not result.accepted


@pytest.mark.parametrize(
    ("prepared_inputs", "error_code"),
    [
        (None, ErrorCode.FORMAT_ERROR),
        (bytes(63), ErrorCode.FORMAT_ERROR),
        ((1).to_bytes(32, "big") * 2, ErrorCode.INVALID_POINT),
    ],
)
def test_malformed_prepared_inputs_are_rejected(verifier, packages, prepared_inputs, error_code):
    package = replace(packages[PackagingMode.PREPARED], prepared_inputs=prepared_inputs)

    assert run(verifier, package).error_code == error_code


@pytest.mark.parametrize("mode", MODES)
def test_pairing_list_order(verifier, packages, verifying_key, public_inputs, mode):
    calls = []

    def pairing_check(pairs):
        calls.append(list(pairs))
        return True

    package = packages[mode]
    assert run(verifier, package, pairing_check).accepted

    (pairs,) = calls
    a = package.proof[:64]
    assert pairs == [
        (negate_g1_bytes(a) if mode == PackagingMode.LITE else a, package.proof[64:192]),
        (g1_to_bytes(verifying_key.alpha_g1), g2_to_bytes(verifying_key.beta_g2)),
        (g1_to_bytes(prepare_inputs(verifying_key, public_inputs)), g2_to_bytes(verifying_key.gamma_g2)),
        (package.proof[192:], g2_to_bytes(verifying_key.delta_g2)),
    ]


def test_pairing_result_is_ground_truth(verifier, packages):
    package = packages[PackagingMode.STANDARD]

    assert run(verifier, package, lambda pairs: False).error_code == ErrorCode.PAIRING_FAILED


def test_pairing_errors_are_invalid_points(verifier, packages):
    def pairing_check(pairs):
        raise AltBn128Error("malformed")

    result = run(verifier, packages[PackagingMode.STANDARD], pairing_check)

    assert result.error_code == ErrorCode.INVALID_POINT


@pytest.mark.parametrize(
    ("proof_is_valid", "balance_sufficient", "error_code"),
    [
        (True, True, None),
        (True, False, ErrorCode.INSUFFICIENT_BALANCE),
        (False, True, ErrorCode.PAIRING_FAILED),
        (False, False, ErrorCode.PAIRING_FAILED),
    ],
)
def test_balance_is_combined_with_the_proof(verifier, packages, proof_is_valid, balance_sufficient, error_code):
    result = run(verifier, packages[PackagingMode.STANDARD], lambda pairs: proof_is_valid, balance_sufficient)

    assert result.error_code == error_code
    assert result.accepted == (proof_is_valid and balance_sufficient)
    assert result.balance_sufficient is balance_sufficient


def test_compute_budget_exceeded_aborts(verifying_key, packages):
    verifier = OnChainVerifier(verifying_key, HostConfig(compute_unit_limit=40_000))

    with pytest.raises(ComputeBudgetExceeded):
        run(verifier, packages[PackagingMode.STANDARD])


def test_invalid_verifying_keys_are_refused(verifying_key):
    off_curve = (FQ(1), FQ(1), FQ(1))
    key = VerifyingKey(
        off_curve,
        verifying_key.beta_g2,
        verifying_key.gamma_g2,
        verifying_key.delta_g2,
        verifying_key.gamma_abc_g1,
    )

    with pytest.raises(InvalidPointError):
        OnChainVerifier(key)
