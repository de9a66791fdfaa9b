from __future__ import annotations

import json
import sys
from pathlib import Path

import numpy as np
import pytest

from mhvmc.experiments import sample_ising


def test_sample_ising_chain_writes_outputs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    output_dir = tmp_path / "nested" / "run"
    monkeypatch.setattr(
        sys,
        "argv",
        ["sample_ising", "--mode", "chain", "--seed", "3", "--output-dir", str(output_dir)],
    )

    sample_ising.main()

    metrics = json.loads((output_dir / "metrics.json").read_text(encoding="utf-8"))
    assert metrics["mode"] == "chain"
    assert np.isfinite(metrics["energy"]["mean_real"])
    assert 0.0 < metrics["acceptance_rate"] <= 1.0
    assert metrics["gradient_norm"] is not None

    with np.load(output_dir / "samples.npz") as arrays:
        assert arrays["samples"].shape[0] == metrics["n_samples"]
        assert arrays["local_values"].shape == (metrics["n_samples"],)
        assert set(np.unique(arrays["samples"])) <= {-1.0, 1.0}
