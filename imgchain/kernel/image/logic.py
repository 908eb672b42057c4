import numpy as np
from typing import Tuple
from PIL import Image
from imgchain.domain.types import Bitmap, Size


def intrinsic_size(bitmap: Bitmap) -> Size:
    """
    Natural size of a bitmap in points.

    A single-representation bitmap reports its logical size (pixels / scale),
    so output rendered at the same scale keeps its pixel dimensions.
    With several density representations it is the component-wise maximum
    pixel width and height across them.
    """
    if len(bitmap.representations) == 1:
        return bitmap.size
    width = max(rep.width for rep in bitmap.representations)
    height = max(rep.height for rep in bitmap.representations)
    return Size(float(width), float(height))


def to_pixel_size(size: Size, scale: float) -> Tuple[int, int]:
    """
    Converts a logical size to whole pixels at the given scale (at least 1x1).
    """
    return max(1, int(round(size.width * scale))), max(1, int(round(size.height * scale)))


def fit_image(image: Image.Image, size: Size, scale: float) -> Image.Image:
    """
    Draws the image into a rect of `size` points rendered at `scale`.
    The content is stretched to fill the rect. Always returns a new RGBA image.
    """
    rgba = image.convert("RGBA")
    target = to_pixel_size(size, scale)
    if rgba.size == target:
        return rgba
    return rgba.resize(target, Image.Resampling.LANCZOS)


def rounded_corner_mask(width: int, height: int, radius_px: float) -> np.ndarray:
    """
    Anti-aliased coverage mask (H, W) in 0.0 - 1.0 for a rounded rectangle.
    The radius is clamped to half of the shorter side.
    """
    r = min(float(radius_px), width / 2.0, height / 2.0)
    if r <= 0:
        return np.ones((height, width), dtype=np.float32)

    # Pixel centres
    xs = np.arange(width, dtype=np.float32) + 0.5
    ys = np.arange(height, dtype=np.float32) + 0.5

    # Offset from the nearest corner circle centre, zero along the straight edges
    dx = np.maximum(np.maximum(r - xs, xs - (width - r)), 0.0)
    dy = np.maximum(np.maximum(r - ys, ys - (height - r)), 0.0)
    dist = np.sqrt(dx[np.newaxis, :] ** 2 + dy[:, np.newaxis] ** 2)

    return np.clip(r - dist + 0.5, 0.0, 1.0).astype(np.float32)


def mask_rounded_corners(image: Image.Image, radius: float, scale: float) -> Image.Image:
    """
    Clips the four corners of the image to `radius` points at `scale`.
    Returns a new RGBA image; the input is left untouched.
    """
    rgba = image.convert("RGBA")
    radius_px = radius * scale
    if radius_px <= 0:
        return rgba

    arr = np.array(rgba, dtype=np.uint8)
    mask = rounded_corner_mask(rgba.width, rgba.height, radius_px)
    alpha = arr[..., 3].astype(np.float32) * mask
    arr[..., 3] = np.round(alpha).astype(np.uint8)
    return Image.fromarray(arr)
