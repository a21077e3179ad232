"""Image dimension inspection for banner images.

Banners are emitted with explicit width and height so the page does not
shift while the image loads. IdentifyInspector asks ImageMagick's
``identify``; PillowInspector reads the header with Pillow in a worker
thread. create_image_inspector picks identify when it is installed.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .converters import run_process
from .errors import ConversionError, ImageInspectionError
from .executable_utils import find_executable

logger = logging.getLogger(__name__)


class IdentifyInspector:
    """Reads image sizes from ``identify`` output (``name FORMAT WxH ...``)."""

    def __init__(self, executable: str):
        self.executable = executable

    async def size(self, image_path: Path) -> tuple[int, int]:
        try:
            output = await run_process([self.executable, str(image_path)])
        except ConversionError as exc:
            raise ImageInspectionError(image_path, str(exc)) from exc
        return parse_identify_output(output, image_path)


class PillowInspector:
    """Reads image sizes with Pillow."""

    async def size(self, image_path: Path) -> tuple[int, int]:
        return await asyncio.to_thread(self._read_size, image_path)

    @staticmethod
    def _read_size(image_path: Path) -> tuple[int, int]:
        try:
            with Image.open(image_path) as img:
                return img.size
        except (OSError, UnidentifiedImageError) as exc:
            raise ImageInspectionError(image_path, str(exc)) from exc


def parse_identify_output(output: str, image_path: Path) -> tuple[int, int]:
    """Parse the geometry column of ``identify`` output.

    Examples:
        >>> parse_identify_output("a.jpg JPEG 640x480 640x480+0+0 8-bit", Path("a.jpg"))
        (640, 480)
    """
    fields = output.split()
    if len(fields) < 3:
        raise ImageInspectionError(image_path, f"unexpected identify output: {output!r}")
    width, sep, height = fields[2].partition("x")
    if not sep or not width.isdigit() or not height.isdigit():
        raise ImageInspectionError(image_path, f"unexpected geometry {fields[2]!r}")
    return int(width), int(height)


def create_image_inspector():
    """Return an identify-backed inspector if available, else Pillow."""
    identify = find_executable("identify")
    if identify:
        logger.debug("using %s for image sizes", identify)
        return IdentifyInspector(identify)
    return PillowInspector()
