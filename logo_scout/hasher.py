# logo_scout/hasher.py
"""
Perceptual difference hash (dHash) of logo images.

Every image goes through one canonical normalization before hashing, so any
two hashes produced by this module are comparable (SVG documents are first
rasterized with cairosvg at the normalization height):

1. scale to :data:`NORMALIZED_HEIGHT` px high, keeping the aspect ratio;
2. add an alpha channel and flatten onto :data:`BACKGROUND_FILL`;
3. squash to a :data:`GRID_WIDTH` x :data:`GRID_HEIGHT` grid;
4. stretch contrast, convert to grayscale;
5. one bit per horizontally adjacent pixel pair, ``1`` when left > right.

The 64 bits are packed row-major, most significant first, and rendered as
16 lowercase hex digits.
"""
from __future__ import annotations

import io
from typing import Final, Optional

from PIL import Image, ImageOps

from logo_scout.errors import DecodeFailure, ImageRejected, UnsupportedContent
from logo_scout.logger import get_logger

__all__ = [
    "MIN_IMAGE_BYTES",
    "MAX_SOURCE_PIXELS",
    "NORMALIZED_HEIGHT",
    "BACKGROUND_FILL",
    "GRID_WIDTH",
    "GRID_HEIGHT",
    "HASH_BITS",
    "SVG_CONTENT_TYPE",
    "compute_dhash",
    "dhash",
    "hamming_distance",
]

MIN_IMAGE_BYTES: Final[int] = 1000
NORMALIZED_HEIGHT: Final[int] = 64
# caps pathological banners (e.g. 20000x10) before the exact-fit resize
MAX_NORMALIZED_WIDTH: Final[int] = 4096
# checked from the header, before any pixel data is decoded
MAX_SOURCE_PIXELS: Final[int] = 25_000_000
BACKGROUND_FILL: Final[tuple[int, int, int]] = (255, 255, 255)
GRID_WIDTH: Final[int] = 9
GRID_HEIGHT: Final[int] = 8
HASH_BITS: Final[int] = (GRID_WIDTH - 1) * GRID_HEIGHT

SVG_CONTENT_TYPE: Final[str] = "image/svg+xml"

_DECODE_ERRORS = (OSError, ValueError, SyntaxError, EOFError, ArithmeticError, Image.DecompressionBombError)

log = get_logger("hasher")


def _check_asset(content_type: Optional[str], length: int) -> str:
    mime = (content_type or "").split(";", 1)[0].strip().lower()
    if not mime.startswith("image/"):
        raise UnsupportedContent(f"not an image (content type {content_type!r})")
    if length < MIN_IMAGE_BYTES:
        raise ImageRejected(f"image too small ({length} bytes < {MIN_IMAGE_BYTES})")
    return mime


def _rasterize_svg(data: bytes) -> bytes:
    """Render SVG markup to PNG at the normalization height."""
    import cairosvg

    return cairosvg.svg2png(bytestring=data, output_height=NORMALIZED_HEIGHT)


def _normalize(img: Image.Image) -> Image.Image:
    width, height = img.size
    if width <= 0 or height <= 0:
        raise DecodeFailure(f"empty image {width}x{height}")
    scaled_width = min(MAX_NORMALIZED_WIDTH, max(1, round(width * NORMALIZED_HEIGHT / height)))
    rgba = img.convert("RGBA").resize((scaled_width, NORMALIZED_HEIGHT), Image.Resampling.LANCZOS)

    canvas = Image.new("RGBA", rgba.size, BACKGROUND_FILL + (255,))
    flat = Image.alpha_composite(canvas, rgba).convert("RGB")

    grid = flat.resize((GRID_WIDTH, GRID_HEIGHT), Image.Resampling.LANCZOS)
    grid = ImageOps.autocontrast(grid, preserve_tone=True)
    return grid.convert("L")


def _grid_bits(grid: Image.Image) -> int:
    pixels = grid.tobytes()
    value = 0
    for row in range(GRID_HEIGHT):
        offset = row * GRID_WIDTH
        for col in range(GRID_WIDTH - 1):
            left = pixels[offset + col]
            right = pixels[offset + col + 1]
            value = (value << 1) | (1 if left > right else 0)
    return value


def compute_dhash(data: bytes, content_type: Optional[str], length: Optional[int] = None) -> str:
    """Hash *data* or raise the reason it cannot be hashed.

    SVG documents are rasterized first; every other ``image/*`` type goes
    straight to Pillow.

    Raises
    ------
    UnsupportedContent
        *content_type* is not ``image/*``.
    ImageRejected
        The asset is smaller than :data:`MIN_IMAGE_BYTES`, or its header
        declares more than :data:`MAX_SOURCE_PIXELS` pixels.
    DecodeFailure
        The bytes cannot be decoded (or rasterized).
    """
    mime = _check_asset(content_type, len(data) if length is None else length)
    try:
        if mime == SVG_CONTENT_TYPE:
            data = _rasterize_svg(data)
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
            if width * height > MAX_SOURCE_PIXELS:
                raise ImageRejected(f"image too large ({width}x{height} > {MAX_SOURCE_PIXELS} pixels)")
            img.load()
            grid = _normalize(img)
    except _DECODE_ERRORS as exc:
        raise DecodeFailure(f"cannot decode image: {exc}") from exc
    return f"{_grid_bits(grid):0{HASH_BITS // 4}x}"


def dhash(data: bytes, content_type: Optional[str], length: Optional[int] = None) -> Optional[str]:
    """Return the 16-hex-digit dHash of an image, or ``None`` if it is not hashable."""
    try:
        return compute_dhash(data, content_type, length)
    except (UnsupportedContent, DecodeFailure) as exc:
        log.debug("Hash rejected: %s", exc)
        return None


def hamming_distance(hash_a: str, hash_b: str) -> int:
    """Number of differing bits between two hex hashes (compared over 64 bits)."""
    return (int(hash_a, 16) ^ int(hash_b, 16)).bit_count()
