from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from mhvmc.config.schemas import LatticeConfig, RunConfig
from mhvmc.machine.rbm import RbmSpin
from mhvmc.physics.lattice import Chain, SquareLattice
from mhvmc.physics.operators import TransverseFieldIsing
from mhvmc.sampling.backend import Operator, SampleSet
from mhvmc.sampling.driver import compute_samples
from mhvmc.sampling.metropolis import MetropolisLocal
from mhvmc.sampling.schedules import StepsRange
from mhvmc.types import SPIN_HALF_STATES, ComplexArray
from mhvmc.utils.logging import log_event
from mhvmc.utils.rng import RngStreams
from mhvmc.vmc.estimators import MeanWithError, blocking_error_bars, gradient, local_values

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Estimate:
    """Expectation value, per-sample local values and optional gradient of one run."""

    mean_error: MeanWithError
    local_values: ComplexArray
    gradient: ComplexArray | None
    acceptance_rate: float
    sample_set: SampleSet

    @property
    def n_samples(self) -> int:
        return self.sample_set.n_samples


def estimate(
    sampler: MetropolisLocal,
    operator: Operator,
    steps: StepsRange,
    batch_size: int,
    blocking_bins: int = 10,
    compute_gradients: bool = True,
) -> Estimate:
    """Sample, evaluate local values, and reduce them to a mean and a gradient."""

    sampled = compute_samples(sampler, steps, compute_gradients=compute_gradients)
    values = local_values(
        sampled.samples,
        sampled.log_values,
        sampler.machine,
        operator,
        batch_size=batch_size,
    )
    stats = blocking_error_bars(values, n_bins=max(1, min(blocking_bins, values.shape[0])))

    grad: ComplexArray | None = None
    if sampled.gradients is not None:
        grad = gradient(values, sampled.gradients)

    log_event(
        logger,
        "estimate",
        mean_real=stats.mean.real,
        mean_imag=stats.mean.imag,
        stderr=stats.stderr,
        n_samples=sampled.n_samples,
        acceptance_rate=sampler.acceptance_rate,
        gradient_norm=None if grad is None else float(np.linalg.norm(grad)),
    )
    return Estimate(
        mean_error=stats,
        local_values=values,
        gradient=grad,
        acceptance_rate=sampler.acceptance_rate,
        sample_set=sampled,
    )


def build_lattice(config: LatticeConfig) -> Chain | SquareLattice:
    if config.kind == "chain":
        return Chain(length=config.L, pbc=config.pbc)
    return SquareLattice(L=config.L)


def run_from_config(config: RunConfig) -> Estimate:
    """Build lattice, Ising operator, RBM and sampler from ``config`` and run :func:`estimate`."""

    if tuple(sorted(config.sampler.local_states)) != SPIN_HALF_STATES:
        raise ValueError(
            "the Ising operator acts on spins {-1, +1}, received local_states "
            f"{config.sampler.local_states}"
        )

    rngs = RngStreams(seed=config.seed)
    lattice = build_lattice(config.lattice)
    operator = TransverseFieldIsing(
        bonds=lattice.bonds,
        n_sites=lattice.n_sites,
        h=config.ising.h,
        J=config.ising.J,
    )
    machine = RbmSpin.create(
        rngs.split_jax(),
        n_visible=lattice.n_sites,
        alpha=config.rbm.alpha,
        init_std=config.rbm.init_std,
        use_visible_bias=config.rbm.use_visible_bias,
        use_hidden_bias=config.rbm.use_hidden_bias,
    )
    sampler = MetropolisLocal(
        machine,
        batch_size=config.sampler.batch_size,
        local_states=config.sampler.local_states,
        rng=rngs.spawn_generator(),
    )
    return estimate(
        sampler,
        operator,
        config.steps.to_range(),
        batch_size=config.estimator.batch_size,
        blocking_bins=config.estimator.blocking_bins,
        compute_gradients=config.estimator.compute_gradients,
    )
