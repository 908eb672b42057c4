import math
import os
from dataclasses import dataclass
from imgchain.domain.interfaces import ProcessOptions
from imgchain.kernel.image.validation import validate_bool, validate_float


@dataclass(frozen=True)
class AppConfig:
    scale_factor: float
    preload_all_frames: bool
    output_dir: str
    output_format: str


def _positive_scale(raw: str | None) -> float:
    scale = validate_float(raw, 1.0)
    return scale if math.isfinite(scale) and scale > 0 else 1.0


# Global application constants (overridable through the environment)
APP_CONFIG = AppConfig(
    scale_factor=_positive_scale(os.getenv("IMGCHAIN_SCALE_FACTOR")),
    preload_all_frames=validate_bool(os.getenv("IMGCHAIN_PRELOAD_FRAMES"), False),
    output_dir=os.path.abspath(os.getenv("IMGCHAIN_OUTPUT_DIR", "processed")),
    output_format="PNG",
)

# Options used when the caller does not supply any
DEFAULT_PROCESS_OPTIONS = ProcessOptions(
    scale_factor=APP_CONFIG.scale_factor,
    preload_all_frames=APP_CONFIG.preload_all_frames,
)
