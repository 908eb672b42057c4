from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple, TypeAlias, Union

from PIL import Image


class Size(NamedTuple):
    """
    Width/height pair in logical points.
    """

    width: float
    height: float

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True, eq=False)
class Bitmap:
    """
    Decoded raster image.

    `representations` holds one Pillow image per pixel density, the first
    one being the primary image. Animated sources either carry every frame
    in `frames` (eager) or keep the encoded bytes in `source_data` so frames
    can be decoded on demand (lazy).
    """

    representations: Tuple[Image.Image, ...]
    scale: float = 1.0
    frames: Tuple[Image.Image, ...] = ()
    frame_durations: Tuple[float, ...] = ()
    source_data: Optional[bytes] = None

    def __post_init__(self) -> None:
        if not self.representations:
            raise ValueError("Bitmap requires at least one representation")
        if self.scale <= 0:
            raise ValueError(f"Bitmap scale must be positive, got {self.scale}")

    @classmethod
    def from_image(cls, image: Image.Image, scale: float = 1.0) -> "Bitmap":
        return cls(representations=(image,), scale=scale)

    @property
    def image(self) -> Image.Image:
        return self.representations[0]

    @property
    def pixel_size(self) -> Tuple[int, int]:
        return self.image.size

    @property
    def size(self) -> Size:
        w, h = self.image.size
        return Size(w / self.scale, h / self.scale)

    @property
    def is_animated(self) -> bool:
        return len(self.frames) > 1 or self.source_data is not None


@dataclass(frozen=True)
class ImageItem:
    """An already decoded bitmap."""

    image: Bitmap


@dataclass(frozen=True)
class DataItem:
    """Encoded image bytes (PNG, JPEG, GIF, ...)."""

    data: bytes


# Input accepted by every processor
ProcessItem: TypeAlias = Union[ImageItem, DataItem]
