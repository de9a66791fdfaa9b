from mhvmc.sampling.backend import Machine, Operator, SampleSet, Suggestion
from mhvmc.sampling.driver import compute_samples
from mhvmc.sampling.flipper import Flipper
from mhvmc.sampling.metropolis import MetropolisLocal
from mhvmc.sampling.schedules import StepsRange

__all__ = [
    "Flipper",
    "Machine",
    "MetropolisLocal",
    "Operator",
    "SampleSet",
    "StepsRange",
    "Suggestion",
    "compute_samples",
]
