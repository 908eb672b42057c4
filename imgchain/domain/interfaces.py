import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from imgchain.domain.types import Bitmap, ProcessItem
from imgchain.kernel.image.validation import validate_bool, validate_float


@dataclass(frozen=True)
class ProcessOptions:
    """
    Per-request configuration read by processors.
    """

    # Display pixel density used when building output bitmaps
    scale_factor: float

    # Decode every frame of animated sources up front
    preload_all_frames: bool

    def __post_init__(self) -> None:
        if not math.isfinite(self.scale_factor) or self.scale_factor <= 0:
            raise ValueError(
                f"scale_factor must be a positive number, got {self.scale_factor}"
            )

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], defaults: Optional["ProcessOptions"] = None
    ) -> "ProcessOptions":
        """
        Builds options from a loosely typed mapping, falling back to `defaults`
        for missing keys.
        """
        base_scale = defaults.scale_factor if defaults else 1.0
        base_preload = defaults.preload_all_frames if defaults else False
        return cls(
            scale_factor=validate_float(data.get("scale_factor"), base_scale),
            preload_all_frames=validate_bool(
                data.get("preload_all_frames"), base_preload
            ),
        )


@runtime_checkable
class IProcessor(Protocol):
    """
    Interface for any image processing step.
    Returns None when the step cannot produce a result for the item.
    """

    @property
    def identifier(self) -> str: ...

    def process(
        self, item: ProcessItem, options: ProcessOptions
    ) -> Optional[Bitmap]: ...


class IImageDecoder(Protocol):
    """
    Strategy interface for turning encoded bytes into a Bitmap.
    """

    def __call__(
        self, data: bytes, scale: float, preload_all_frames: bool
    ) -> Optional[Bitmap]: ...
