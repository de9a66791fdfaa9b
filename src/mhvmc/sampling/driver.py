from __future__ import annotations

import logging

import numpy as np

from mhvmc.sampling.backend import SampleSet
from mhvmc.sampling.metropolis import MetropolisLocal
from mhvmc.sampling.schedules import StepsRange
from mhvmc.utils.logging import log_event

logger = logging.getLogger(__name__)


def compute_samples(
    sampler: MetropolisLocal,
    steps: StepsRange,
    compute_gradients: bool = False,
    reset: bool = True,
) -> SampleSet:
    """Run ``steps.end`` Metropolis steps and record ``steps.size`` batches.

    Rows of the returned arrays are ordered by step, then by chain, so row
    ``k * batch_size + i`` is chain ``i`` at the ``k``-th recorded step. With
    ``reset=False`` the sampler continues from its current chains.
    """

    if reset:
        sampler.reset()

    batch_size = sampler.batch_size
    n_rows = steps.size * batch_size

    samples = np.empty((n_rows, sampler.system_size), dtype=np.float64)
    log_values = np.empty(n_rows, dtype=np.complex128)
    gradients: np.ndarray | None = None
    if compute_gradients:
        gradients = np.empty((n_rows, sampler.machine.n_par), dtype=np.complex128)

    cursor = 0
    for index in range(steps.end):
        sampler.next()
        if not steps.records(index):
            continue

        batch, values = sampler.read()
        block = slice(cursor, cursor + batch_size)
        samples[block] = batch
        log_values[block] = values
        if gradients is not None:
            der = np.asarray(sampler.machine.der_log(batch))
            if der.shape != (batch_size, sampler.machine.n_par):
                raise ValueError(
                    "machine.der_log returned shape "
                    f"{der.shape}, expected {(batch_size, sampler.machine.n_par)}"
                )
            gradients[block] = der
        cursor += batch_size

    log_event(
        logger,
        "compute_samples",
        level=logging.DEBUG,
        n_rows=n_rows,
        steps=[steps.start, steps.end, steps.step],
        acceptance_rate=sampler.acceptance_rate,
    )
    return SampleSet(samples=samples, log_values=log_values, gradients=gradients)
