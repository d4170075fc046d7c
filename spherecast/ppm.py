"""
Image output.

Colors are mapped to integers with ``trunc(255.999 * value)`` and written
as plain-text PPM (``P3``), one pixel per line, row-major from the top row.
Channels are not clamped unless asked for, so a color slightly above 1.0
can produce 256.
"""

from __future__ import annotations
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterator, Tuple, Union
import numpy as np

from .vec3 import Color

logger = logging.getLogger(__name__)

PPM_MAGIC = 'P3'
MAX_CHANNEL = 255
CHANNEL_SCALE = 255.999

PathLike = Union[str, os.PathLike]


class ImageWriteError(Exception):
    """The output image could not be written."""
    pass


class ImageFormatError(Exception):
    """A file is not a valid plain-text PPM image."""
    pass


def to_rgb_triplet(color: Color, clamp: bool = False) -> Tuple[int, int, int]:
    """Convert a [0, 1] color to an integer (r, g, b) triplet."""
    r, g, b = (int(CHANNEL_SCALE * c) for c in color)
    if clamp:
        return tuple(min(max(v, 0), MAX_CHANNEL) for v in (r, g, b))
    return r, g, b


def to_rgb_array(image: np.ndarray, clamp: bool = False) -> np.ndarray:
    """Convert an HDR float image of shape (h, w, 3) to integer channels.

    Values are truncated toward zero, matching ``int()`` on each channel.
    """
    rgb = np.trunc(CHANNEL_SCALE * np.asarray(image, dtype=np.float64)).astype(np.int64)
    if clamp:
        rgb = np.clip(rgb, 0, MAX_CHANNEL)
    return rgb


def iter_ppm_lines(image: np.ndarray, clamp: bool = False) -> Iterator[str]:
    """Yield the lines of a P3 file (without newlines): header, then pixels."""
    height, width = image.shape[:2]
    yield PPM_MAGIC
    yield f"{width} {height}"
    yield str(MAX_CHANNEL)
    for r, g, b in to_rgb_array(image, clamp).reshape(-1, 3).tolist():
        yield f"{r} {g} {b}"


def format_ppm(image: np.ndarray, clamp: bool = False) -> str:
    """Serialize an image to P3 text, newline-terminated."""
    return '\n'.join(iter_ppm_lines(image, clamp)) + '\n'


def write_ppm(image: np.ndarray, path: PathLike, clamp: bool = False) -> Path:
    """Write an image as P3 to path.

    The data goes to a temporary file next to the destination which is
    then renamed over it, so the destination never holds a partial image.

    Raises:
        ImageWriteError: if the destination cannot be written
    """
    path = Path(path)
    text = format_ppm(image, clamp)
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            'w', dir=path.parent, prefix=f'.{path.name}.',
            suffix='.tmp', delete=False, encoding='ascii', newline='\n'
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(text)
        # NamedTemporaryFile creates 0600 files
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise ImageWriteError(f"Cannot write image to {path}: {e}") from e

    logger.info("Wrote %s (%d bytes)", path, len(text))
    return path


def save_image(image: np.ndarray, path: PathLike, clamp: bool = False) -> Path:
    """Save image to file; the extension picks the format.

    ``.ppm`` is written as plain text by write_ppm. Anything else is encoded
    by Pillow from 8-bit channels, which are always clamped.
    """
    path = Path(path)
    if path.suffix.lower() == '.ppm':
        return write_ppm(image, path, clamp)

    from PIL import Image as PILImage

    rgb = to_rgb_array(image, clamp=True).astype(np.uint8)
    try:
        PILImage.fromarray(rgb).save(path)
    except (OSError, ValueError) as e:
        raise ImageWriteError(f"Cannot write image to {path}: {e}") from e

    logger.info("Wrote %s", path)
    return path


def read_ppm(path: PathLike) -> np.ndarray:
    """Read a P3 file back into an integer array of shape (h, w, 3).

    Raises:
        ImageFormatError: if the file is not a well-formed P3 image
    """
    try:
        text = Path(path).read_text(encoding='ascii')
    except UnicodeDecodeError as e:
        raise ImageFormatError(f"{path} is not a plain-text image: {e}") from e
    tokens = []
    for line in text.splitlines():
        tokens.extend(line.split('#', 1)[0].split())

    if len(tokens) < 4 or tokens[0] != PPM_MAGIC:
        raise ImageFormatError(f"{path} is not a P3 image")
    try:
        width, height, max_value = (int(t) for t in tokens[1:4])
        values = [int(t) for t in tokens[4:]]
    except ValueError as e:
        raise ImageFormatError(f"{path} has a non-integer field: {e}") from e

    if max_value != MAX_CHANNEL:
        raise ImageFormatError(f"Unsupported max channel value {max_value}")
    if len(values) != width * height * 3:
        raise ImageFormatError(
            f"Expected {width * height * 3} channel values, found {len(values)}"
        )
    return np.array(values, dtype=np.int64).reshape(height, width, 3)
