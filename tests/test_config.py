from __future__ import annotations

import pytest
from pydantic import ValidationError

from mhvmc.config.presets import ising_chain_small_config, ising_square_small_config
from mhvmc.config.schemas import LatticeConfig, SamplerConfig, StepsConfig
from mhvmc.sampling.schedules import StepsRange


def test_steps_config_builds_range() -> None:
    steps = StepsConfig(start=2, end=10, step=3).to_range()
    assert steps == StepsRange(2, 10, 3)
    assert steps.size == 3


@pytest.mark.parametrize(
    "kwargs",
    [{"start": 5, "end": 5}, {"start": 0, "end": 10, "step": 0}, {"start": -1, "end": 3}],
)
def test_steps_config_rejects_degenerate_schedules(kwargs: dict[str, int]) -> None:
    with pytest.raises(ValidationError):
        StepsConfig(**kwargs)


def test_sampler_config_validates_local_states() -> None:
    assert SamplerConfig(batch_size=4).local_states == (-1.0, 1.0)
    with pytest.raises(ValidationError):
        SamplerConfig(batch_size=4, local_states=(1.0,))
    with pytest.raises(ValidationError):
        SamplerConfig(batch_size=4, local_states=(1.0, 1.0))


def test_extra_fields_are_forbidden() -> None:
    with pytest.raises(ValidationError):
        LatticeConfig(L=4, dims=2)  # type: ignore[call-arg]


def test_presets_are_consistent() -> None:
    chain = ising_chain_small_config(seed=3)
    square = ising_square_small_config()
    assert chain.seed == 3
    assert chain.lattice.n_sites == 8
    assert square.lattice.n_sites == 16
    assert chain.steps.to_range().size == 50
