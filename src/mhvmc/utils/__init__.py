from mhvmc.utils.checks import require_shape, require_spin_values
from mhvmc.utils.io import ensure_dir, save_json, save_npz
from mhvmc.utils.logging import configure_logging, log_event
from mhvmc.utils.rng import RngStreams

__all__ = [
    "RngStreams",
    "configure_logging",
    "ensure_dir",
    "log_event",
    "require_shape",
    "require_spin_values",
    "save_json",
    "save_npz",
]
