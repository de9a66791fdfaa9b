from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from mhvmc.types import ComplexArray


@dataclass(frozen=True)
class ParameterSlice:
    """Slice metadata for flatten/unflatten operations."""

    name: str
    start: int
    stop: int
    shape: tuple[int, ...]


@dataclass(frozen=True)
class FlatParameterLayout:
    """Deterministic layout mapping between named tensors and flat parameter vectors."""

    slices: tuple[ParameterSlice, ...]

    @property
    def size(self) -> int:
        return int(sum(s.stop - s.start for s in self.slices))

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(s.name for s in self.slices)


def build_layout(named_arrays: dict[str, np.ndarray]) -> FlatParameterLayout:
    """Create a deterministic flat-vector layout sorted by key."""

    slices: list[ParameterSlice] = []
    cursor = 0
    for name in sorted(named_arrays.keys()):
        shape = tuple(int(d) for d in np.shape(named_arrays[name]))
        length = int(np.prod(shape))
        slices.append(ParameterSlice(name=name, start=cursor, stop=cursor + length, shape=shape))
        cursor += length
    return FlatParameterLayout(tuple(slices))


def flatten_with_layout(
    named_arrays: dict[str, np.ndarray], layout: FlatParameterLayout
) -> ComplexArray:
    """Pack named parameter tensors into a single contiguous complex vector."""

    flat = np.zeros(layout.size, dtype=np.complex128)
    for sl in layout.slices:
        flat[sl.start : sl.stop] = np.asarray(named_arrays[sl.name]).reshape(-1)
    return flat


def unflatten_with_layout(vector: ComplexArray, layout: FlatParameterLayout) -> dict[str, ComplexArray]:
    """Unpack a flat vector back into tensor dictionary format."""

    vector = np.asarray(vector)
    if vector.ndim != 1:
        raise ValueError("vector must be rank-1")
    if vector.shape[0] != layout.size:
        raise ValueError(
            f"vector length {vector.shape[0]} does not match layout size {layout.size}"
        )

    out: dict[str, ComplexArray] = {}
    for sl in layout.slices:
        out[sl.name] = np.asarray(vector[sl.start : sl.stop].reshape(sl.shape), dtype=np.complex128)
    return out
