__version__ = "Unknown-dev"

from pathlib import Path

from imgchain.domain.interfaces import IProcessor, ProcessOptions
from imgchain.domain.types import Bitmap, DataItem, ImageItem, ProcessItem, Size
from imgchain.features.processing.processors import (
    ChainProcessor,
    DefaultProcessor,
    ResizingProcessor,
    RoundCornerProcessor,
    chain,
)

# Read version from VERSION file if it exists
_version_file = Path(__file__).parent / "VERSION"
if _version_file.exists():
    __version__ = _version_file.read_text().strip()

__all__ = [
    "Bitmap",
    "ChainProcessor",
    "DataItem",
    "DefaultProcessor",
    "IProcessor",
    "ImageItem",
    "ProcessItem",
    "ProcessOptions",
    "ResizingProcessor",
    "RoundCornerProcessor",
    "Size",
    "chain",
]
