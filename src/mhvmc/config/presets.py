from __future__ import annotations

from mhvmc.config.schemas import (
    EstimatorConfig,
    IsingConfig,
    LatticeConfig,
    RbmConfig,
    RunConfig,
    SamplerConfig,
    StepsConfig,
)


def ising_chain_small_config(seed: int = 7) -> RunConfig:
    """Small CI/laptop run on a periodic 8-site chain at the critical field."""

    return RunConfig(
        lattice=LatticeConfig(kind="chain", L=8),
        ising=IsingConfig(h=1.0, J=1.0),
        rbm=RbmConfig(alpha=1.0, init_std=0.05),
        sampler=SamplerConfig(batch_size=16),
        steps=StepsConfig(start=50, end=250, step=4),
        estimator=EstimatorConfig(batch_size=64, blocking_bins=10, compute_gradients=True),
        seed=seed,
    )


def ising_square_small_config(seed: int = 11) -> RunConfig:
    """Small run on a periodic 4x4 square lattice."""

    return RunConfig(
        lattice=LatticeConfig(kind="square", L=4),
        ising=IsingConfig(h=3.044, J=-1.0),
        rbm=RbmConfig(alpha=1.0, init_std=0.02),
        sampler=SamplerConfig(batch_size=32),
        steps=StepsConfig(start=100, end=500, step=8),
        estimator=EstimatorConfig(batch_size=128, blocking_bins=10, compute_gradients=True),
        seed=seed,
    )
