"""
Pixel sampling for the hashing package.

Decodes raw image bytes and reduces them to fixed-size grayscale
luminance matrices, the common input of every hash algorithm.
"""

from __future__ import annotations

import io
from typing import Optional

from .dependencies import Image, np, _logger
from .errors import ImageDecodeError

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

ALPHA_MODES = ('RGBA', 'RGBa', 'LA', 'La', 'PA')

# Full-scale value of high bit depth modes
WIDE_MODE_RANGES = {
    'I;16': 65535,
    'I;16B': 65535,
    'I;16L': 65535,
    'I;16N': 65535,
    'I': 65535,
    'F': 1.0,
}


def _has_alpha(img: Image.Image) -> bool:
    return img.mode in ALPHA_MODES or 'transparency' in img.info


def _flatten_alpha(img: Image.Image) -> Image.Image:
    """Composite an image with transparency onto a black canvas."""
    rgba = img.convert('RGBA')
    canvas = Image.new('RGB', rgba.size, (0, 0, 0))
    canvas.paste(rgba, mask=rgba.getchannel('A'))
    return canvas


def _reduce_depth(img: Image.Image) -> Image.Image:
    """Scale a 16-bit, 32-bit integer or float image down to 8-bit 'L'."""
    full_scale = WIDE_MODE_RANGES[img.mode]
    samples = np.clip(np.asarray(img, dtype=np.float64), 0, full_scale)
    if isinstance(full_scale, int):
        samples = np.floor(samples / 256)
    else:
        samples = np.rint(samples * 255 / full_scale)
    return Image.fromarray(samples.astype(np.uint8))


def to_rgb(img: Image.Image) -> Image.Image:
    """
    Convert any decoded image to RGB.

    Transparent pixels are blended onto black, so identical visible content
    gives identical pixels whatever colour sits under alpha 0. High bit
    depth modes are scaled to 8 bits instead of clipped.

    Raises:
        ImageDecodeError: If the mode cannot be converted
    """
    if img.mode == 'RGB' and 'transparency' not in img.info:
        return img

    try:
        if img.mode in WIDE_MODE_RANGES:
            img = _reduce_depth(img)
        if _has_alpha(img):
            return _flatten_alpha(img)
        return img.convert('RGB')
    except (OSError, ValueError) as e:
        _logger.debug(f"Image mode conversion failed (mode={img.mode}): {e}")
        raise ImageDecodeError(f"Unsupported image mode {img.mode}: {e}") from e


def decode_image(data: bytes) -> Image.Image:
    """
    Decode raw bytes into an RGB Pillow image.

    Transparency is composited onto black and deep images are scaled to
    8 bits, see to_rgb().

    Args:
        data: Encoded image file contents

    Returns:
        Fully loaded image in RGB mode

    Raises:
        ImageDecodeError: If the bytes are not a supported raster format,
            are truncated, or exceed the decompression bomb limit
    """
    if not data:
        raise ImageDecodeError("Empty image data")

    try:
        img = Image.open(io.BytesIO(data))
        # Force load to detect truncated/corrupt images early
        img.load()
    except Image.UnidentifiedImageError as e:
        raise ImageDecodeError(f"Not a valid image file: {e}") from e
    except Image.DecompressionBombError as e:
        raise ImageDecodeError(f"Image too large: {e}") from e
    except (OSError, ValueError, SyntaxError) as e:
        raise ImageDecodeError(f"Corrupt or truncated image: {e}") from e

    return to_rgb(img)


def describe_image(data: bytes) -> tuple[int, int, str]:
    """
    Read the dimensions and MIME type of encoded image bytes.

    Only the header is parsed; pixel data is not decoded.

    Returns:
        Tuple of (width, height, mime_type)

    Raises:
        ImageDecodeError: If the bytes are not a recognised image format
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            mime_type = Image.MIME.get(img.format or '', 'application/octet-stream')
            return img.width, img.height, mime_type
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        raise ImageDecodeError(f"Not a valid image file: {e}") from e


def luminance_matrix(
    img: Image.Image,
    width: int,
    height: int,
    box: Optional[tuple[float, float, float, float]] = None,
) -> np.ndarray:
    """
    Stretch an image (or a region of it) to width x height and return luminance.

    Aspect ratio is not preserved. Resampling uses Pillow's BOX filter so
    every output sample is the area average of the source pixels it covers.

    Args:
        img: Decoded image
        width: Target width in samples
        height: Target height in samples
        box: Optional (left, upper, right, lower) source region

    Returns:
        float64 array of shape (height, width), row-major image order,
        holding 0.299R + 0.587G + 0.114B per resampled pixel
    """
    if width < 1 or height < 1:
        raise ValueError(f"Sample size must be positive, got {width}x{height}")

    img = to_rgb(img)

    resized = img.resize((width, height), Image.Resampling.BOX, box=box)
    rgb = np.asarray(resized, dtype=np.float64)

    r_weight, g_weight, b_weight = LUMA_WEIGHTS
    return rgb[..., 0] * r_weight + rgb[..., 1] * g_weight + rgb[..., 2] * b_weight


def sample_luminance(data: bytes, width: int, height: int) -> np.ndarray:
    """
    Decode image bytes and sample a width x height luminance matrix.

    Raises:
        ImageDecodeError: If the bytes cannot be decoded
    """
    return luminance_matrix(decode_image(data), width, height)


__all__ = [
    'LUMA_WEIGHTS',
    'to_rgb',
    'decode_image',
    'describe_image',
    'luminance_matrix',
    'sample_luminance',
]
