"""Batched local Metropolis sampling and estimators for variational Monte Carlo."""

from mhvmc.sampling import Flipper, MetropolisLocal, SampleSet, StepsRange, compute_samples
from mhvmc.vmc import gradient, local_values

__all__ = [
    "Flipper",
    "MetropolisLocal",
    "SampleSet",
    "StepsRange",
    "compute_samples",
    "gradient",
    "local_values",
]
