"""Circuit-specific Groth16 trusted setup and explicit persistence of the keys."""

import fcntl
import logging
import os
import secrets
import tempfile
from contextlib import contextmanager
from pathlib import Path
from random import Random, SystemRandom

from py_ecc.optimized_bn128 import G1, G2, multiply

from zkverifier.circuits.constraint_system import Circuit, synthesize
from zkverifier.data_structures.pk import ProvingKey
from zkverifier.data_structures.vk import VerifyingKey
from zkverifier.elliptic_curves.points import G1_INFINITY, G2_INFINITY
from zkverifier.groth16.qap import Qap
from zkverifier.parameters import r

logger = logging.getLogger(__name__)


def random_scalar(rng: Random) -> int:
    """Sample a scalar uniformly in [1, r)."""
    return rng.randrange(1, r)


def check_randomness_source(rng: Random | None, allow_insecure: bool = False) -> Random:
    """Return `rng`, or a cryptographically secure source if `rng` is `None`.

    Args:
        rng (Random | None): The randomness source.
        allow_insecure (bool): Accept sources other than `secrets.SystemRandom`, e.g., seeded generators for
            reproducible tests. The secrets they produce cannot be treated as toxic waste safely discarded.

    Raises:
        TypeError: If `rng` is not an instance of `random.Random`.
        ValueError: If `rng` is not cryptographically secure and `allow_insecure` is not set.
    """
    if rng is None:
        return secrets.SystemRandom()
    if not isinstance(rng, Random):
        msg = f"Randomness source must be an instance of random.Random, got {type(rng).__name__}"
        raise TypeError(msg)
    if not isinstance(rng, SystemRandom):
        if not allow_insecure:
            msg = f"Randomness source {type(rng).__name__} is not cryptographically secure"
            raise ValueError(msg)
        logger.warning("Randomness source %s is not cryptographically secure", type(rng).__name__)
    return rng


def _g1_mul(scalar: int):
    return multiply(G1, scalar) if scalar else G1_INFINITY


def _g2_mul(scalar: int):
    return multiply(G2, scalar) if scalar else G2_INFINITY


class KeyManager:
    """Generation, storage and loading of Groth16 keys.

    Keys are plain objects passed explicitly to the prover and the verifier. Persistence only happens through
    `store` and the `load_*` methods.
    """

    @staticmethod
    def setup(
        circuit: Circuit, rng: Random | None = None, allow_insecure: bool = False
    ) -> tuple[ProvingKey, VerifyingKey]:
        """Run the circuit-specific Groth16 setup.

        Single-party setup: whoever runs it learns the trapdoor (tau, alpha, beta, gamma, delta). A production
        deployment requires a multi-party ceremony instead.

        Args:
            circuit (Circuit): The circuit. Only its shape is used, values may be unassigned.
            rng (Random | None): Source of randomness for the trapdoor. Defaults to `secrets.SystemRandom()`.
            allow_insecure (bool): Accept a source which is not cryptographically secure.

        Returns:
            The proving key and the verifying key.

        Raises:
            ValueError: If `rng` is not cryptographically secure and `allow_insecure` is not set.
        """
        rng = check_randomness_source(rng, allow_insecure)
        cs = synthesize(circuit)
        qap = Qap(cs)

        tau = random_scalar(rng)
        while tau in qap.domain:
            tau = random_scalar(rng)
        alpha, beta, gamma, delta = (random_scalar(rng) for _ in range(4))
        gamma_inverse = pow(gamma, -1, r)
        delta_inverse = pow(delta, -1, r)

        u, v, w = qap.evaluate_columns_at(tau)
        combined = [(beta * u_i + alpha * v_i + w_i) % r for u_i, v_i, w_i in zip(u, v, w)]
        n_instance = qap.num_instance_variables

        z_tau = 1
        for point in qap.domain:
            z_tau = z_tau * (tau - point) % r

        vk = VerifyingKey(
            alpha_g1=_g1_mul(alpha),
            beta_g2=_g2_mul(beta),
            gamma_g2=_g2_mul(gamma),
            delta_g2=_g2_mul(delta),
            gamma_abc_g1=[_g1_mul(value * gamma_inverse % r) for value in combined[:n_instance]],
        )
        pk = ProvingKey(
            vk=vk,
            beta_g1=_g1_mul(beta),
            delta_g1=_g1_mul(delta),
            a_query=[_g1_mul(u_i) for u_i in u],
            b_g1_query=[_g1_mul(v_i) for v_i in v],
            b_g2_query=[_g2_mul(v_i) for v_i in v],
            h_query=[
                _g1_mul(pow(tau, j, r) * z_tau % r * delta_inverse % r) for j in range(qap.domain_size - 1)
            ],
            l_query=[_g1_mul(value * delta_inverse % r) for value in combined[n_instance:]],
        )
        logger.debug(
            "Setup done: %d constraints, %d instance variables, %d witness variables",
            cs.num_constraints,
            cs.num_instance_variables,
            cs.num_witness_variables,
        )
        return pk, vk

    @staticmethod
    def store(key: ProvingKey | VerifyingKey, path: str | Path) -> None:
        """Write `key` to `path` atomically, holding the advisory lock of the key file."""
        path = Path(path)
        data = key.to_bytes()
        with _key_file_lock(path):
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        logger.info("Stored %s (%d bytes) to %s", type(key).__name__, len(data), path)

    @staticmethod
    def load_proving_key(path: str | Path) -> ProvingKey:
        """Load and validate a proving key written by `store`."""
        path = Path(path)
        with _key_file_lock(path):
            data = path.read_bytes()
        return ProvingKey.from_bytes(data)

    @staticmethod
    def load_verifying_key(path: str | Path) -> VerifyingKey:
        """Load and validate a verifying key written by `store`."""
        path = Path(path)
        with _key_file_lock(path):
            data = path.read_bytes()
        return VerifyingKey.from_bytes(data)


@contextmanager
def _key_file_lock(path: Path):
    """Hold an exclusive advisory lock on the sidecar lock file of `path`."""
    lock_path = path.with_name(path.name + ".lock")
    with lock_path.open("a") as lock_file:
        fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
