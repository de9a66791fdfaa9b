from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from mhvmc.sampling.schedules import StepsRange


class LatticeConfig(BaseModel):
    """Chain or periodic square lattice."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["chain", "square"] = "chain"
    L: int = Field(ge=2)
    pbc: bool = True

    @property
    def n_sites(self) -> int:
        return self.L if self.kind == "chain" else self.L * self.L


class IsingConfig(BaseModel):
    """Transverse-field Ising couplings in the sigma^z basis."""

    model_config = ConfigDict(extra="forbid")

    h: float = Field(default=1.0, ge=0.0)
    J: float = 1.0


class RbmConfig(BaseModel):
    """Complex RBM structure and initialisation."""

    model_config = ConfigDict(extra="forbid")

    alpha: float = Field(default=1.0, gt=0.0)
    init_std: float = Field(default=0.01, gt=0.0)
    use_visible_bias: bool = True
    use_hidden_bias: bool = True


class SamplerConfig(BaseModel):
    """Batched local Metropolis sampler."""

    model_config = ConfigDict(extra="forbid")

    batch_size: int = Field(ge=1)
    local_states: tuple[float, ...] = (-1.0, 1.0)

    @field_validator("local_states")
    @classmethod
    def _check_local_states(cls, value: tuple[float, ...]) -> tuple[float, ...]:
        if len(value) < 2:
            raise ValueError("local_states needs at least two values")
        if len(set(value)) != len(value):
            raise ValueError("local_states must be distinct")
        return value


class StepsConfig(BaseModel):
    """Sweep schedule: burn-in ``start``, total ``end`` steps, recording stride ``step``."""

    model_config = ConfigDict(extra="forbid")

    start: int = Field(default=0, ge=0)
    end: int = Field(ge=1)
    step: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def _check_advancing(self) -> StepsConfig:
        if self.end <= self.start:
            raise ValueError("end must be > start")
        return self

    def to_range(self) -> StepsRange:
        return StepsRange(start=self.start, end=self.end, step=self.step)


class EstimatorConfig(BaseModel):
    """Local-value batching and error analysis."""

    model_config = ConfigDict(extra="forbid")

    batch_size: int = Field(default=64, ge=1)
    blocking_bins: int = Field(default=10, ge=1)
    compute_gradients: bool = True


class RunConfig(BaseModel):
    """Complete sampling/estimation run on a transverse-field Ising model."""

    model_config = ConfigDict(extra="forbid")

    lattice: LatticeConfig
    ising: IsingConfig
    rbm: RbmConfig
    sampler: SamplerConfig
    steps: StepsConfig
    estimator: EstimatorConfig = Field(default_factory=EstimatorConfig)
    seed: int = Field(default=0, ge=0)
