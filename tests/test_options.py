import dataclasses
import unittest
import pytest
from PIL import Image
from imgchain.domain.interfaces import ProcessOptions
from imgchain.domain.types import Bitmap, DataItem, ImageItem, Size
from imgchain.kernel.image.validation import validate_bool, validate_float, validate_size
from imgchain.kernel.system.config import APP_CONFIG, DEFAULT_PROCESS_OPTIONS


class TestProcessOptions(unittest.TestCase):
    def test_is_frozen(self):
        options = ProcessOptions(scale_factor=2.0, preload_all_frames=True)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            options.scale_factor = 3.0  # type: ignore[misc]

    def test_rejects_non_positive_scale(self):
        for bad in (0.0, -1.0, float("nan"), float("inf")):
            with self.assertRaises(ValueError):
                ProcessOptions(scale_factor=bad, preload_all_frames=False)

    def test_from_dict_layers_over_defaults(self):
        defaults = ProcessOptions(scale_factor=3.0, preload_all_frames=True)

        options = ProcessOptions.from_dict({"scale_factor": "2"}, defaults)

        self.assertEqual(options.scale_factor, 2.0)
        self.assertTrue(options.preload_all_frames)

    def test_from_dict_without_defaults(self):
        options = ProcessOptions.from_dict({})
        self.assertEqual(options, ProcessOptions(scale_factor=1.0, preload_all_frames=False))

    def test_from_dict_ignores_garbage(self):
        options = ProcessOptions.from_dict(
            {"scale_factor": "fast", "preload_all_frames": "yes"}
        )
        self.assertEqual(options.scale_factor, 1.0)
        self.assertTrue(options.preload_all_frames)


def test_default_options_come_from_app_config():
    assert DEFAULT_PROCESS_OPTIONS.scale_factor == APP_CONFIG.scale_factor
    assert DEFAULT_PROCESS_OPTIONS.preload_all_frames == APP_CONFIG.preload_all_frames
    assert APP_CONFIG.scale_factor > 0
    assert APP_CONFIG.output_format == "PNG"


def test_validate_float():
    assert validate_float("1.5") == 1.5
    assert validate_float(None, 2.0) == 2.0
    assert validate_float("abc", 3.0) == 3.0


@pytest.mark.parametrize(
    "val, expected",
    [("1", True), ("true", True), ("ON", True), ("0", False), ("no", False), (1, True), (None, False)],
)
def test_validate_bool(val, expected):
    assert validate_bool(val) is expected


@pytest.mark.parametrize(
    "val, expected",
    [
        ("64x32", Size(64.0, 32.0)),
        ([10, 20], Size(10.0, 20.0)),
        ((1.5, 2), Size(1.5, 2.0)),
        ({"width": 5, "height": 6}, Size(5.0, 6.0)),
        (None, None),
        ("64", None),
        ([1, 2, 3], None),
        ({"width": 5}, None),
        (42, None),
    ],
)
def test_validate_size(val, expected):
    assert validate_size(val) == expected


def test_size_is_empty():
    assert Size(0, 10).is_empty
    assert Size(10, -1).is_empty
    assert not Size(1, 1).is_empty


def test_bitmap_requires_representation():
    with pytest.raises(ValueError):
        Bitmap(representations=())


def test_bitmap_rejects_bad_scale():
    with pytest.raises(ValueError):
        Bitmap.from_image(Image.new("RGB", (1, 1)), scale=0)


def test_bitmap_equality_is_identity():
    img = Image.new("RGB", (2, 2))
    a = Bitmap.from_image(img)
    b = Bitmap.from_image(img)

    assert a == a
    assert a != b
    assert ImageItem(a) == ImageItem(a)
    assert ImageItem(a) != ImageItem(b)


def test_data_item_equality():
    assert DataItem(b"abc") == DataItem(b"abc")
    assert DataItem(b"abc") != DataItem(b"abd")
