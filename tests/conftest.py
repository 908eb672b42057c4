import io
import random
import pytest
from PIL import Image
from imgchain.domain.interfaces import ProcessOptions
from imgchain.domain.types import Bitmap


def encode(img: Image.Image, fmt: str = "PNG", **kwargs) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format=fmt, **kwargs)
    return buf.getvalue()


@pytest.fixture
def options():
    return ProcessOptions(scale_factor=1.0, preload_all_frames=False)


@pytest.fixture
def retina_options():
    return ProcessOptions(scale_factor=2.0, preload_all_frames=False)


@pytest.fixture
def red_image():
    return Image.new("RGB", (40, 30), color=(255, 0, 0))


@pytest.fixture
def bitmap(red_image):
    return Bitmap.from_image(red_image)


@pytest.fixture
def png_bytes(red_image):
    return encode(red_image, "PNG")


@pytest.fixture
def gif_bytes():
    colors = [(255, 0, 0), (0, 255, 0), (0, 0, 255)]
    frames = [Image.new("RGB", (16, 12), color=c) for c in colors]
    return encode(
        frames[0], "GIF", save_all=True, append_images=frames[1:], duration=50, loop=0
    )


@pytest.fixture
def encode_image():
    return encode


def corrupt(data: bytes, rng: random.Random) -> bytes:
    """Overwrites 1-8 random bytes of an encoded payload."""
    buf = bytearray(data)
    for _ in range(rng.randint(1, 8)):
        buf[rng.randrange(len(buf))] = rng.randrange(256)
    return bytes(buf)


@pytest.fixture
def corrupt_bytes():
    return corrupt


@pytest.fixture
def encoded_samples(gif_bytes):
    noise = Image.effect_noise((24, 16), 64).convert("RGB")
    return {
        "GIF": gif_bytes,
        "TIFF": encode(noise, "TIFF"),
        "PNG": encode(noise, "PNG"),
        "JPEG": encode(noise, "JPEG"),
        "BMP": encode(noise, "BMP"),
    }


@pytest.fixture
def small_pixel_limit(monkeypatch):
    # Corrupted headers can claim huge dimensions
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1_000_000)
