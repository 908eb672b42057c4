import math
from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Optional
from imgchain.domain.interfaces import IImageDecoder, IProcessor, ProcessOptions
from imgchain.domain.types import Bitmap, DataItem, ImageItem, ProcessItem, Size
from imgchain.infrastructure.decoders.pillow_decoder import decode_image
from imgchain.kernel.image.logic import fit_image, intrinsic_size, mask_rounded_corners


class ImageProcessor(IProcessor):
    """
    Base class for the bundled processors. Adds chaining.
    """

    @property
    def identifier(self) -> str:
        return f"imgchain.{type(self).__name__}"

    def append(self, another: IProcessor) -> "ChainProcessor":
        """
        Returns a processor that runs `self` and feeds its bitmap to `another`.
        """
        return ChainProcessor(self, another)


@dataclass(frozen=True)
class ChainProcessor(ImageProcessor):
    """
    Runs `first`, then `second` on the resulting bitmap.
    Short-circuits to None when `first` produces nothing.
    """

    first: IProcessor
    second: IProcessor

    @property
    def identifier(self) -> str:
        parts = (self.first.identifier, self.second.identifier)
        return "|>".join(part for part in parts if part)

    def process(self, item: ProcessItem, options: ProcessOptions) -> Optional[Bitmap]:
        image = self.first.process(item, options)
        if image is None:
            return None
        return self.second.process(ImageItem(image), options)


def chain(first: IProcessor, second: IProcessor, *rest: IProcessor) -> ChainProcessor:
    """
    Composes processors left to right: chain(a, b, c) == (a then b) then c.
    """
    result = ChainProcessor(first, second)
    for processor in rest:
        result = ChainProcessor(result, processor)
    return result


@dataclass(frozen=True)
class DefaultProcessor(ImageProcessor):
    """
    Decodes bytes into a bitmap; passes bitmaps through untouched.
    """

    decoder: IImageDecoder = field(default=decode_image, repr=False)

    @property
    def identifier(self) -> str:
        return ""

    def process(self, item: ProcessItem, options: ProcessOptions) -> Optional[Bitmap]:
        if isinstance(item, ImageItem):
            return item.image
        if isinstance(item, DataItem):
            return self.decoder(
                item.data, options.scale_factor, options.preload_all_frames
            )
        return None


class BitmapProcessor(ImageProcessor):
    """
    Processor that only understands decoded bitmaps.
    Encoded bytes are routed through DefaultProcessor first.
    """

    @abstractmethod
    def transform(self, bitmap: Bitmap, options: ProcessOptions) -> Optional[Bitmap]: ...

    def process(self, item: ProcessItem, options: ProcessOptions) -> Optional[Bitmap]:
        if isinstance(item, ImageItem):
            try:
                return self.transform(item.image, options)
            except (ValueError, OSError, OverflowError, MemoryError):
                return None
        if isinstance(item, DataItem):
            return chain(DefaultProcessor(), self).process(item, options)
        return None


def _coerce_size(processor: object, target_size: object, required: bool = False) -> None:
    if target_size is None:
        if required:
            raise ValueError("target_size is required")
        return
    # Accept plain (w, h) tuples/lists from callers
    w, h = target_size  # type: ignore[misc]
    size = Size(float(w), float(h))
    if not (math.isfinite(size.width) and math.isfinite(size.height)):
        raise ValueError(f"target_size must be finite, got {w}x{h}")
    object.__setattr__(processor, "target_size", size)


def _format_size(size: Size) -> str:
    return f"{size.width:g}x{size.height:g}"


@dataclass(frozen=True)
class RoundCornerProcessor(BitmapProcessor):
    """
    Fits a bitmap into `target_size` (or its intrinsic size) and clips the
    corners to `corner_radius` points.

    A target size with a zero or negative side is ignored and the intrinsic
    size is used instead.
    """

    corner_radius: float
    target_size: Optional[Size] = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.corner_radius) or self.corner_radius < 0:
            raise ValueError(
                f"corner_radius must be a non-negative number, got {self.corner_radius}"
            )
        _coerce_size(self, self.target_size)

    @property
    def identifier(self) -> str:
        if self.target_size is None:
            return f"imgchain.RoundCornerProcessor({self.corner_radius:g})"
        return (
            f"imgchain.RoundCornerProcessor({self.corner_radius:g}"
            f"_{_format_size(self.target_size)})"
        )

    def effective_size(self, bitmap: Bitmap) -> Size:
        if self.target_size is not None and not self.target_size.is_empty:
            return self.target_size
        return intrinsic_size(bitmap)

    def transform(self, bitmap: Bitmap, options: ProcessOptions) -> Optional[Bitmap]:
        size = self.effective_size(bitmap)
        fitted = fit_image(bitmap.image, size, options.scale_factor)
        rounded = mask_rounded_corners(fitted, self.corner_radius, options.scale_factor)
        return Bitmap.from_image(rounded, scale=options.scale_factor)


@dataclass(frozen=True)
class ResizingProcessor(BitmapProcessor):
    """
    Fits a bitmap into `target_size` points without masking.
    """

    target_size: Size

    def __post_init__(self) -> None:
        _coerce_size(self, self.target_size, required=True)

    @property
    def identifier(self) -> str:
        return f"imgchain.ResizingProcessor({_format_size(self.target_size)})"

    def transform(self, bitmap: Bitmap, options: ProcessOptions) -> Optional[Bitmap]:
        size = self.target_size if not self.target_size.is_empty else intrinsic_size(bitmap)
        fitted = fit_image(bitmap.image, size, options.scale_factor)
        return Bitmap.from_image(fitted, scale=options.scale_factor)
