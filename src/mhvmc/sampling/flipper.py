from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from mhvmc.sampling.backend import Suggestion
from mhvmc.types import BoolArray, ConfigBatch, FloatArray, IntArray
from mhvmc.utils.checks import require_shape


class Flipper:
    """Suggests which site of each chain to change next, and to which value.

    Holds the authoritative batch of ``batch_size`` Markov chains (one row per
    chain) and exactly one outstanding suggestion per chain. The suggestion is
    committed or dropped by :meth:`next`, which then draws a fresh one.
    """

    def __init__(
        self,
        shape: tuple[int, int],
        local_states: Sequence[float],
        rng: np.random.Generator,
    ) -> None:
        batch_size, system_size = shape
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, received {batch_size}")
        if system_size < 1:
            raise ValueError(f"system_size must be >= 1, received {system_size}")

        states = np.unique(np.asarray(local_states, dtype=np.float64))
        if states.shape[0] != len(local_states):
            raise ValueError(f"local_states must be distinct, received {tuple(local_states)}")
        if states.shape[0] < 2:
            raise ValueError("at least two local states are needed to propose a move")

        self._local_states: FloatArray = states
        self._rng = rng
        self._state: ConfigBatch = np.zeros((batch_size, system_size), dtype=np.float64)
        self._sites: IntArray = np.zeros(batch_size, dtype=np.int64)
        self._values: FloatArray = np.zeros(batch_size, dtype=np.float64)
        self._rows: IntArray = np.arange(batch_size, dtype=np.int64)
        self._initialized = False

    @property
    def batch_size(self) -> int:
        return int(self._state.shape[0])

    @property
    def system_size(self) -> int:
        return int(self._state.shape[1])

    @property
    def local_states(self) -> FloatArray:
        return self._local_states

    @property
    def generator(self) -> np.random.Generator:
        return self._rng

    @property
    def current(self) -> ConfigBatch:
        """Read-only view of the current batch, one configuration per row."""

        self._require_initialized()
        view = self._state.view()
        view.flags.writeable = False
        return view

    def reset(self) -> None:
        """Draw every site of every chain uniformly from the local states."""

        self._state[...] = self._rng.choice(self._local_states, size=self._state.shape)
        self._initialized = True
        self._random_suggestion()

    def read(self) -> Suggestion:
        """Return the outstanding suggestion without consuming it."""

        self._require_initialized()
        return Suggestion(sites=self._sites.copy(), values=self._values.copy())

    def read_into(self, out: ConfigBatch) -> None:
        """Copy the current batch into ``out``."""

        self._require_initialized()
        require_shape("out", out, self._state.shape)
        out[...] = self._state

    def proposed_into(self, out: ConfigBatch) -> None:
        """Write the current batch with every chain's suggestion applied into ``out``."""

        self._require_initialized()
        require_shape("out", out, self._state.shape)
        out[...] = self._state
        out[self._rows, self._sites] = self._values

    def next(self, accept: BoolArray) -> None:
        """Commit the suggestions of accepted chains and draw new ones.

        ``accept[i]`` tells whether chain ``i`` moves; rejected chains are left
        untouched.
        """

        self._require_initialized()
        accept = np.asarray(accept)
        require_shape("accept", accept, (self.batch_size,))
        if accept.dtype != np.bool_:
            raise ValueError(f"accept must be a boolean array, received dtype {accept.dtype}")

        rows = self._rows[accept]
        self._state[rows, self._sites[accept]] = self._values[accept]
        self._random_suggestion()

    def _random_suggestion(self) -> None:
        self._random_sites()
        self._random_values()

    def _random_sites(self) -> None:
        self._sites[...] = self._rng.integers(0, self.system_size, size=self.batch_size)

    def _random_values(self) -> None:
        # Draw among the n - 1 states other than the current one: indices at or
        # above the current index are shifted up by one.
        n_states = self._local_states.shape[0]
        current = self._state[self._rows, self._sites]
        current_idx = np.searchsorted(self._local_states, current)
        drawn = self._rng.integers(0, n_states - 1, size=self.batch_size)
        drawn += drawn >= current_idx
        self._values[...] = self._local_states[drawn]

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("Flipper.reset() must be called before use")
