# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Raster images (signatures, QR codes) as PDF image XObjects.

Baseline JPEGs in grey or RGB are passed through with /DCTDecode.  Every
other image is decoded with Pillow and stored as 8-bit RGB with
/FlateDecode; an alpha channel becomes a /SMask.
"""

import io
import logging
import zlib

from PIL import Image, UnidentifiedImageError
from pikepdf import Name, Pdf, Stream

from .exceptions import ImageEmbedError

logger = logging.getLogger(__name__)

JPEG_MAGIC = b"\xff\xd8\xff"
PNG_MAGIC = b"\x89PNG\r\n\x1a\n"

_JPEG_COLORSPACES = {"L": Name.DeviceGray, "RGB": Name.DeviceRGB}


def detect_format(data: bytes, content_type: str | None = None) -> str | None:
    """Guess "png" or "jpeg" from a content type, then from magic bytes.

    Returns:
        "png", "jpeg" or None when neither matches.
    """
    ctype = (content_type or "").lower()
    if "png" in ctype:
        return "png"
    if "jpeg" in ctype or "jpg" in ctype:
        return "jpeg"
    if data.startswith(PNG_MAGIC):
        return "png"
    if data.startswith(JPEG_MAGIC):
        return "jpeg"
    return None


def _image_stream(pdf: Pdf, width: int, height: int, colorspace: Name) -> Stream:
    stream = pdf.make_stream(b"")
    stream[Name.Type] = Name.XObject
    stream[Name.Subtype] = Name.Image
    stream[Name.Width] = width
    stream[Name.Height] = height
    stream[Name.ColorSpace] = colorspace
    stream[Name.BitsPerComponent] = 8
    return stream


def _has_alpha(img: Image.Image) -> bool:
    if img.mode in ("RGBA", "LA", "PA"):
        return True
    return img.mode == "P" and "transparency" in img.info


def _flate_image(pdf: Pdf, img: Image.Image) -> Stream:
    width, height = img.size
    if _has_alpha(img):
        rgba = img.convert("RGBA")
        rgb = rgba.convert("RGB")
        alpha = rgba.getchannel("A")
        smask = _image_stream(pdf, width, height, Name.DeviceGray)
        smask.write(zlib.compress(alpha.tobytes()), filter=Name.FlateDecode)
    else:
        rgb = img.convert("RGB")
        smask = None

    stream = _image_stream(pdf, width, height, Name.DeviceRGB)
    stream.write(zlib.compress(rgb.tobytes()), filter=Name.FlateDecode)
    if smask is not None:
        stream[Name.SMask] = smask
    return stream


def embed_image(pdf: Pdf, data: bytes, content_type: str | None = None) -> Stream:
    """Create an image XObject from encoded PNG or JPEG bytes.

    Args:
        pdf: Document that will own the XObject.
        data: Encoded image bytes.
        content_type: HTTP content type, if known.

    Returns:
        The image XObject stream.

    Raises:
        ImageEmbedError: If the bytes cannot be decoded.
    """
    if not data:
        raise ImageEmbedError("Empty image data")

    declared = detect_format(data, content_type)
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            actual = (img.format or "").lower()
            if declared and actual and declared != actual:
                logger.debug("Image declared as %s decodes as %s", declared, actual)

            colorspace = _JPEG_COLORSPACES.get(img.mode)
            if actual == "jpeg" and colorspace is not None:
                width, height = img.size
                stream = _image_stream(pdf, width, height, colorspace)
                stream.write(data, filter=Name.DCTDecode)
                return stream
            return _flate_image(pdf, img)
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        ValueError,
    ) as e:
        raise ImageEmbedError(f"Cannot decode image: {e}") from e


def image_size(xobject: Stream) -> tuple[float, float]:
    return float(xobject.Width), float(xobject.Height)


def scale_to_fit(
    width: float, height: float, max_width: float, max_height: float
) -> tuple[float, float]:
    """Largest size with the same aspect ratio that fits the box."""
    if width <= 0 or height <= 0 or max_width <= 0 or max_height <= 0:
        return 0.0, 0.0
    scale = min(max_width / width, max_height / height)
    return width * scale, height * scale


def fit_in_box(
    xobject: Stream,
    box: tuple[float, float, float, float],
    padding: float = 0.0,
) -> tuple[float, float, float, float]:
    """Scale an image into a padded box and centre it.

    Returns:
        (x, y, width, height) to draw the image at.
    """
    x, y, box_w, box_h = box
    img_w, img_h = image_size(xobject)
    w, h = scale_to_fit(img_w, img_h, box_w - 2 * padding, box_h - 2 * padding)
    return x + (box_w - w) / 2, y + (box_h - h) / 2, w, h
