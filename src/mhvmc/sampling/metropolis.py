from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from mhvmc.sampling.backend import Machine
from mhvmc.sampling.flipper import Flipper
from mhvmc.types import SPIN_HALF_STATES, BoolArray, ComplexArray, ConfigBatch, FloatArray

logger = logging.getLogger(__name__)


class MetropolisLocal:
    """Batched Metropolis-Hastings sampler of ``|psi(x)|^2`` with single-site moves.

    Every call to :meth:`next` advances ``batch_size`` independent chains by
    one step. Proposals are symmetric, so a move is accepted with probability
    ``min(1, |psi(x')|^2 / |psi(x)|^2)``, computed from the difference of
    log-amplitudes.
    """

    def __init__(
        self,
        machine: Machine,
        batch_size: int,
        local_states: Sequence[float] = SPIN_HALF_STATES,
        rng: np.random.Generator | int | None = None,
    ) -> None:
        self._machine = machine
        self._flipper = Flipper(
            (batch_size, machine.n_visible),
            local_states,
            np.random.default_rng(rng),
        )

        self._proposed_x: ConfigBatch = np.zeros((batch_size, machine.n_visible), dtype=np.float64)
        self._proposed_y: ComplexArray = np.zeros(batch_size, dtype=np.complex128)
        self._current_y: ComplexArray = np.zeros(batch_size, dtype=np.complex128)
        self._randoms: FloatArray = np.zeros(batch_size, dtype=np.float64)
        self._accept: BoolArray = np.zeros(batch_size, dtype=np.bool_)

        self._ready = False
        self._n_proposed = 0
        self._n_accepted = 0

    @property
    def batch_size(self) -> int:
        return self._flipper.batch_size

    @property
    def system_size(self) -> int:
        return self._flipper.system_size

    @property
    def machine(self) -> Machine:
        return self._machine

    @property
    def local_states(self) -> FloatArray:
        return self._flipper.local_states

    @property
    def acceptance_rate(self) -> float:
        """Fraction of proposed moves accepted since the last stats reset."""

        if self._n_proposed == 0:
            return 0.0
        return self._n_accepted / self._n_proposed

    def reset_acceptance_stats(self) -> None:
        self._n_proposed = 0
        self._n_accepted = 0

    def reset(self) -> None:
        """Randomize all chains and recompute their cached log-amplitudes."""

        self._flipper.reset()
        self._current_y[...] = self._evaluate(self._flipper.current)
        self._ready = True
        self.reset_acceptance_stats()
        logger.debug(
            "reset %d chains of %d sites", self.batch_size, self.system_size
        )

    def refresh(self) -> None:
        """Recompute cached log-amplitudes after the machine parameters changed."""

        self._require_ready()
        self._current_y[...] = self._evaluate(self._flipper.current)

    def read(self) -> tuple[ConfigBatch, ComplexArray]:
        """Current configurations and their cached log-amplitudes (read-only views)."""

        self._require_ready()
        values = self._current_y.view()
        values.flags.writeable = False
        return self._flipper.current, values

    def next(self) -> None:
        """Make one Metropolis step on every chain."""

        self._require_ready()
        self._flipper.proposed_into(self._proposed_x)
        self._proposed_y[...] = self._evaluate(self._proposed_x)

        probabilities = self._acceptance_probabilities()
        self._flipper.generator.random(out=self._randoms)
        np.less(self._randoms, probabilities, out=self._accept)

        self._flipper.next(self._accept)
        self._current_y[self._accept] = self._proposed_y[self._accept]

        self._n_proposed += self.batch_size
        self._n_accepted += int(np.count_nonzero(self._accept))

    def _acceptance_probabilities(self) -> FloatArray:
        finite = np.isfinite(self._proposed_y)
        if not np.all(finite):
            logger.debug(
                "rejecting %d proposals with non-finite log-amplitude",
                int(np.count_nonzero(~finite)),
            )

        with np.errstate(invalid="ignore", over="ignore"):
            log_ratio = 2.0 * np.real(self._proposed_y - self._current_y)
            probabilities = np.exp(np.minimum(log_ratio, 0.0))
        probabilities[~finite] = 0.0
        # NaN only comes from a non-finite cached amplitude; such chains stay put.
        probabilities[np.isnan(probabilities)] = 0.0
        return probabilities

    def _evaluate(self, x: ConfigBatch) -> ComplexArray:
        values = np.asarray(self._machine.log_val(x))
        if values.shape != (x.shape[0],):
            raise ValueError(
                "machine.log_val returned shape "
                f"{values.shape}, expected {(x.shape[0],)}"
            )
        return values.astype(np.complex128, copy=False)

    def _require_ready(self) -> None:
        if not self._ready:
            raise RuntimeError("MetropolisLocal.reset() must be called before sampling")
