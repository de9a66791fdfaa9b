from __future__ import annotations

import jax
import numpy as np
import pytest

from mhvmc.machine.rbm import RbmSpin
from mhvmc.sampling.driver import compute_samples
from mhvmc.sampling.metropolis import MetropolisLocal
from mhvmc.sampling.schedules import StepsRange


def _sampler(seed: int = 3, batch_size: int = 6, n_sites: int = 5) -> MetropolisLocal:
    machine = RbmSpin.create(jax.random.PRNGKey(7), n_visible=n_sites, init_std=0.2)
    return MetropolisLocal(machine, batch_size=batch_size, rng=seed)


def _manual_run(sampler: MetropolisLocal, steps: StepsRange) -> tuple[np.ndarray, np.ndarray]:
    sampler.reset()
    batches: list[np.ndarray] = []
    values: list[np.ndarray] = []
    for i in range(steps.end):
        sampler.next()
        if i in steps.indices():
            batch, logs = sampler.read()
            batches.append(np.array(batch, copy=True))
            values.append(np.array(logs, copy=True))
    return np.concatenate(batches, axis=0), np.concatenate(values, axis=0)


def test_one_record_per_step_per_chain() -> None:
    sampler = _sampler(batch_size=6)
    sampled = compute_samples(sampler, StepsRange(0, 12, 1))

    assert sampled.samples.shape == (12 * 6, 5)
    assert sampled.log_values.shape == (12 * 6,)
    assert sampled.gradients is None
    assert sampled.n_samples == 72


@pytest.mark.parametrize("steps", [StepsRange(0, 12, 1), StepsRange(2, 10, 3), StepsRange(5, 6, 4)])
def test_samples_are_step_major_chain_minor(steps: StepsRange) -> None:
    sampled = compute_samples(_sampler(seed=9), steps)
    expected_x, expected_y = _manual_run(_sampler(seed=9), steps)

    np.testing.assert_array_equal(sampled.samples, expected_x)
    np.testing.assert_array_equal(sampled.log_values, expected_y)
    assert sampled.samples.shape[0] == steps.size * 6


def test_gradients_match_machine_at_recorded_samples() -> None:
    sampler = _sampler()
    sampled = compute_samples(sampler, StepsRange(3, 20, 2), compute_gradients=True)

    assert sampled.gradients is not None
    assert sampled.gradients.shape == (sampled.n_samples, sampler.machine.n_par)
    np.testing.assert_allclose(
        sampled.gradients,
        sampler.machine.der_log(sampled.samples),
        rtol=1.0e-12,
        atol=1.0e-12,
    )
    np.testing.assert_allclose(
        sampled.log_values,
        sampler.machine.log_val(sampled.samples),
        rtol=1.0e-12,
        atol=1.0e-12,
    )


def test_continuing_without_reset() -> None:
    sampler = _sampler()
    with pytest.raises(RuntimeError):
        compute_samples(sampler, StepsRange(0, 4, 1), reset=False)

    sampler.reset()
    sampler.next()
    before = np.array(sampler.read()[0], copy=True)
    sampled = compute_samples(sampler, StepsRange(0, 1, 1), reset=False)

    # one step from ``before``: each chain differs in at most one site
    diff = (sampled.samples != before).sum(axis=1)
    assert np.all(diff <= 1)


def test_output_does_not_alias_sampler_state() -> None:
    sampler = _sampler()
    sampled = compute_samples(sampler, StepsRange(0, 1, 1))
    snapshot = np.array(sampled.samples, copy=True)
    for _ in range(10):
        sampler.next()
    np.testing.assert_array_equal(sampled.samples, snapshot)
