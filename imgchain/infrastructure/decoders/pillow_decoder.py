import io
from typing import Iterator, Optional, Tuple
from PIL import Image, ImageSequence
from imgchain.domain.types import Bitmap
from imgchain.kernel.system.logging import get_logger

logger = get_logger("decoder")

# Fallback frame delay (seconds) for animations without timing info
DEFAULT_FRAME_DURATION = 0.1


def _frame_duration(frame: Image.Image) -> float:
    duration_ms = frame.info.get("duration")
    if not duration_ms:
        return DEFAULT_FRAME_DURATION
    return float(duration_ms) / 1000.0


def _materialize_frames(img: Image.Image) -> Tuple[Tuple[Image.Image, ...], Tuple[float, ...]]:
    frames = []
    durations = []
    for frame in ImageSequence.Iterator(img):
        frames.append(frame.convert("RGBA"))
        durations.append(_frame_duration(frame))
    return tuple(frames), tuple(durations)


def decode_image(
    data: bytes, scale: float = 1.0, preload_all_frames: bool = False
) -> Optional[Bitmap]:
    """
    Decodes encoded bytes (any format Pillow understands) into a Bitmap.

    Multi-frame sources either get every frame decoded now (preload_all_frames)
    or only the first one, with the encoded bytes kept on the bitmap for
    iter_frames(). Returns None for empty or undecodable input.
    """
    if not data:
        return None

    try:
        with Image.open(io.BytesIO(data)) as img:
            n_frames = getattr(img, "n_frames", 1)

            if n_frames > 1:
                if preload_all_frames:
                    frames, durations = _materialize_frames(img)
                    return Bitmap(
                        representations=(frames[0],),
                        scale=scale,
                        frames=frames,
                        frame_durations=durations,
                    )

                img.seek(0)
                return Bitmap(
                    representations=(img.convert("RGBA"),),
                    scale=scale,
                    source_data=bytes(data),
                )

            img.load()
            return Bitmap(representations=(img.copy(),), scale=scale)
    except Exception as e:
        logger.debug(f"Undecodable image data ({len(data)} bytes): {e}")
        return None


def iter_frames(bitmap: Bitmap) -> Iterator[Image.Image]:
    """
    Yields every animation frame of a bitmap, decoding lazily from the
    retained source when the frames were not preloaded.
    Still images yield their primary image once.
    """
    if bitmap.frames:
        yield from bitmap.frames
        return

    if bitmap.source_data is None:
        yield bitmap.image
        return

    with Image.open(io.BytesIO(bitmap.source_data)) as img:
        for frame in ImageSequence.Iterator(img):
            yield frame.convert("RGBA")
