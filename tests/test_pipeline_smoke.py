from __future__ import annotations

from itertools import product

import jax
import numpy as np
import pytest

from mhvmc.config.presets import ising_chain_small_config
from mhvmc.machine.rbm import RbmSpin
from mhvmc.physics.lattice import Chain
from mhvmc.physics.operators import TransverseFieldIsing
from mhvmc.sampling.metropolis import MetropolisLocal
from mhvmc.sampling.schedules import StepsRange
from mhvmc.vmc.pipeline import estimate, run_from_config


def _exact_energy(machine: RbmSpin, operator: TransverseFieldIsing, n_sites: int) -> float:
    configs = np.asarray(list(product((-1.0, 1.0), repeat=n_sites)))
    log_psi = machine.log_val(configs)
    weights = np.exp(2.0 * np.real(log_psi - np.max(np.real(log_psi))))

    eloc = np.zeros(configs.shape[0], dtype=np.complex128)
    for k, x in enumerate(configs):
        x_primes, mels = operator.get_conn(x)
        eloc[k] = np.sum(mels * np.exp(machine.log_val(x_primes) - log_psi[k]))
    return float(np.real(np.sum(weights * eloc) / np.sum(weights)))


def test_small_config_smoke_runs() -> None:
    base = ising_chain_small_config(seed=5)
    cfg = base.model_copy(
        update={
            "steps": base.steps.model_copy(update={"start": 10, "end": 60, "step": 2}),
            "sampler": base.sampler.model_copy(update={"batch_size": 8}),
        }
    )

    result = run_from_config(cfg)

    assert result.n_samples == 25 * 8
    assert result.local_values.shape == (result.n_samples,)
    assert np.isfinite(result.mean_error.mean)
    assert np.isfinite(result.mean_error.stderr)
    assert result.gradient is not None
    assert np.all(np.isfinite(result.gradient))
    assert 0.0 < result.acceptance_rate <= 1.0


def test_sampled_energy_matches_exact_enumeration() -> None:
    chain = Chain(length=4)
    operator = TransverseFieldIsing(bonds=chain.bonds, n_sites=4, h=1.0, J=1.0)
    machine = RbmSpin.create(jax.random.PRNGKey(8), n_visible=4, alpha=1.0, init_std=0.3)
    sampler = MetropolisLocal(machine, batch_size=128, rng=8)

    result = estimate(
        sampler,
        operator,
        StepsRange(100, 500, 4),
        batch_size=256,
        blocking_bins=20,
        compute_gradients=False,
    )

    exact = _exact_energy(machine, operator, 4)
    assert result.gradient is None
    assert abs(result.mean_error.mean.real - exact) < 5.0 * result.mean_error.stderr + 0.02


def test_run_from_config_rejects_non_spin_local_states() -> None:
    base = ising_chain_small_config(seed=5)
    cfg = base.model_copy(
        update={"sampler": base.sampler.model_copy(update={"local_states": (0.0, 1.0)})}
    )

    with pytest.raises(ValueError, match="local_states"):
        run_from_config(cfg)
