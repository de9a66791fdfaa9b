from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from mhvmc.types import ComplexArray, ConfigArray, ConfigBatch, IntArray


@dataclass(frozen=True)
class Suggestion:
    """One proposed local update per chain.

    Row ``i`` of ``sites``/``values`` is chain ``i``'s proposal: overwrite site
    ``sites[i]`` with ``values[i]``.
    """

    sites: IntArray
    values: ConfigArray

    def __len__(self) -> int:
        return int(self.sites.shape[0])


@dataclass(frozen=True)
class SampleSet:
    """Raw output of one sampling run, ordered step-major and chain-minor."""

    samples: ConfigBatch
    log_values: ComplexArray
    gradients: ComplexArray | None = None

    @property
    def n_samples(self) -> int:
        return int(self.samples.shape[0])


class Machine(Protocol):
    """Variational wavefunction evaluated on batches of configurations.

    Must be deterministic for fixed parameters and input.
    """

    @property
    def n_visible(self) -> int:
        """Number of sites in one configuration."""

    @property
    def n_par(self) -> int:
        """Number of variational parameters."""

    def log_val(self, x: ConfigBatch) -> ComplexArray:
        """Return one complex log-amplitude per row of ``x``."""

    def der_log(self, x: ConfigBatch) -> ComplexArray:
        """Return ``d log psi / d theta_k`` per row, shape ``(n_rows, n_par)``."""


class Operator(Protocol):
    """Physical operator given through its matrix elements in the sampled basis."""

    def get_conn(self, x: ConfigArray) -> tuple[ConfigBatch, ComplexArray]:
        """Return connected configurations ``x'`` and elements ``O(x, x')``.

        The list must be finite for every reachable configuration.
        """
