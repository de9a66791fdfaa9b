from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StepsRange:
    """Sweep schedule: ``end`` Metropolis steps, recording every ``step`` from ``start``.

    Steps ``0 .. start - 1`` are burn-in. The recorded step indices are
    ``start, start + step, ...`` up to, but excluding, ``end``.
    """

    start: int
    end: int
    step: int

    def __post_init__(self) -> None:
        if self.step <= 0:
            raise ValueError(f"step must be > 0, received {self.step}")
        if self.end <= self.start:
            raise ValueError(f"end must be > start, received start={self.start}, end={self.end}")
        if self.start < 0:
            raise ValueError(f"start must be >= 0, received {self.start}")

    @classmethod
    def from_tuple(cls, steps: tuple[int, int, int]) -> StepsRange:
        start, end, step = steps
        return cls(start=start, end=end, step=step)

    @property
    def size(self) -> int:
        """Number of recorded steps, ``ceil((end - start) / step)``."""

        return (self.end - self.start - 1) // self.step + 1

    def indices(self) -> range:
        return range(self.start, self.end, self.step)

    def records(self, index: int) -> bool:
        """Whether output is recorded after step ``index``."""

        return index >= self.start and (index - self.start) % self.step == 0

    def __len__(self) -> int:
        return self.size
