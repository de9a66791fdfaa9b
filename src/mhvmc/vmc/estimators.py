from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from mhvmc.sampling.backend import Machine, Operator
from mhvmc.types import ComplexArray, ConfigBatch, IntArray


@dataclass(frozen=True)
class MeanWithError:
    """Mean estimate with standard error from block statistics."""

    mean: complex
    stderr: float


def blocking_error_bars(values: ComplexArray, n_bins: int) -> MeanWithError:
    """Blocking analysis of a (possibly complex) sample series.

    The standard error is taken from the modulus of the block-mean deviations.
    """

    values = np.asarray(values)
    if values.ndim != 1:
        raise ValueError("values must be rank-1")
    if n_bins < 1:
        raise ValueError("n_bins must be >= 1")
    if values.shape[0] < n_bins:
        raise ValueError("need at least n_bins samples for blocking")

    trimmed = values[: (values.shape[0] // n_bins) * n_bins]
    block_size = trimmed.shape[0] // n_bins

    blocks = trimmed.reshape(n_bins, block_size)
    block_means = np.mean(blocks, axis=1)

    mean = complex(np.mean(block_means))
    if n_bins == 1:
        return MeanWithError(mean=mean, stderr=0.0)

    stderr = float(np.std(block_means, ddof=1) / np.sqrt(n_bins))
    return MeanWithError(mean=mean, stderr=stderr)


class _ConnectionBuffer:
    """Fixed-size staging area for connected configurations.

    Rows are flushed through the machine ``batch_size`` at a time; each row
    remembers which sample it belongs to and its matrix element.
    """

    def __init__(
        self,
        machine: Machine,
        log_values: ComplexArray,
        out: ComplexArray,
        batch_size: int,
    ) -> None:
        self._machine = machine
        self._log_values = log_values
        self._out = out
        self._x: ConfigBatch = np.zeros((batch_size, machine.n_visible), dtype=np.float64)
        self._mels: ComplexArray = np.zeros(batch_size, dtype=np.complex128)
        self._owners: IntArray = np.zeros(batch_size, dtype=np.int64)
        self._size = 0

    @property
    def capacity(self) -> int:
        return int(self._x.shape[0])

    def add(self, owner: int, x_primes: ConfigBatch, mels: ComplexArray) -> None:
        offset = 0
        while offset < x_primes.shape[0]:
            n = min(self.capacity - self._size, x_primes.shape[0] - offset)
            dst = slice(self._size, self._size + n)
            self._x[dst] = x_primes[offset : offset + n]
            self._mels[dst] = mels[offset : offset + n]
            self._owners[dst] = owner
            self._size += n
            offset += n
            if self._size == self.capacity:
                self.flush()

    def flush(self) -> None:
        if self._size == 0:
            return
        n = self._size
        # Pad with the last staged row so the machine always sees one shape.
        self._x[n:] = self._x[n - 1]

        log_psi = np.asarray(self._machine.log_val(self._x))
        if log_psi.shape != (self.capacity,):
            raise ValueError(
                "machine.log_val returned shape "
                f"{log_psi.shape}, expected {(self.capacity,)}"
            )

        owners = self._owners[:n]
        terms = self._mels[:n] * np.exp(log_psi[:n] - self._log_values[owners])
        np.add.at(self._out, owners, terms)
        self._size = 0


def local_values(
    samples: ConfigBatch,
    log_values: ComplexArray,
    machine: Machine,
    operator: Operator,
    batch_size: int,
) -> ComplexArray:
    """Local estimator ``sum_x' O(x, x') psi(x') / psi(x)`` for every sample.

    Wavefunction evaluations of connected configurations are grouped into
    batches of ``batch_size`` rows across samples.
    """

    samples = np.asarray(samples, dtype=np.float64)
    log_values = np.asarray(log_values, dtype=np.complex128)
    if samples.ndim != 2:
        raise ValueError(f"samples must be rank-2, received shape {samples.shape}")
    if samples.shape[1] != machine.n_visible:
        raise ValueError(
            f"samples have {samples.shape[1]} sites, machine expects {machine.n_visible}"
        )
    if log_values.shape != (samples.shape[0],):
        raise ValueError(
            f"log_values shape {log_values.shape} does not match {samples.shape[0]} samples"
        )
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, received {batch_size}")

    out = np.zeros(samples.shape[0], dtype=np.complex128)
    buffer = _ConnectionBuffer(machine, log_values, out, batch_size)
    for i in range(samples.shape[0]):
        x_primes, mels = operator.get_conn(samples[i])
        x_primes = np.asarray(x_primes, dtype=np.float64)
        mels = np.asarray(mels, dtype=np.complex128)
        if x_primes.ndim != 2 or x_primes.shape[1] != samples.shape[1]:
            raise ValueError(
                f"operator returned connections of shape {x_primes.shape}, "
                f"expected (n_conn, {samples.shape[1]})"
            )
        if mels.shape != (x_primes.shape[0],):
            raise ValueError(
                f"operator returned {x_primes.shape[0]} configurations "
                f"but {mels.shape[0]} matrix elements"
            )
        buffer.add(i, x_primes, mels)
    buffer.flush()
    return out


def gradient(values: ComplexArray, gradients: ComplexArray) -> ComplexArray:
    """Covariance estimate ``<conj(E) D_k> - <conj(E)> <D_k>`` over all samples.

    ``values`` holds one local value per sample, ``gradients`` the matching
    rows of log-derivatives.
    """

    values = np.asarray(values)
    gradients = np.asarray(gradients)
    if values.ndim != 1:
        raise ValueError("values must be rank-1")
    if gradients.ndim != 2:
        raise ValueError("gradients must have shape (n_samples, n_par)")
    if values.shape[0] != gradients.shape[0]:
        raise ValueError(
            "sample axis mismatch between values and gradients: "
            f"{values.shape[0]} != {gradients.shape[0]}"
        )
    if values.shape[0] == 0:
        raise ValueError("cannot estimate a gradient from zero samples")

    centered = np.conj(values) - np.mean(np.conj(values))
    return np.asarray(centered @ gradients / values.shape[0], dtype=np.complex128)
