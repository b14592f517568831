"""Image loading for base garments and design overlays.

Image sources are opaque strings handed over by the catalog or by uploads:
- data URLs (``data:image/png;base64,...``)
- http(s) URLs
- file:// URLs or plain filesystem paths

Every source decodes to an RGBA PIL image. Any failure is reported as a
single ImageDecodeFailure so the caller never has to know which stage
(fetch, base64, decode) went wrong.
"""

import base64
import binascii
import io
import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

import requests
from PIL import Image

from models.errors import ImageDecodeFailure

logger = logging.getLogger(__name__)


class ImageLoader:
    """Utility for decoding image sources into RGBA PIL images."""

    def __init__(self, http_timeout=None, session=None):
        """
        Args:
            http_timeout: Passed to requests for http(s) sources (None = no timeout)
            session: Optional requests.Session to reuse connections
        """
        self.http_timeout = http_timeout
        self._session = session

    def load(self, source):
        """Decode a source into a fully loaded RGBA image.

        Args:
            source: data URL, http(s) URL, file URL, path, raw bytes or a PIL image

        Returns:
            PIL.Image.Image in RGBA mode

        Raises:
            ImageDecodeFailure: the source could not be fetched or decoded
        """
        if isinstance(source, Image.Image):
            return source.convert('RGBA')
        if not source:
            raise ImageDecodeFailure(source, "empty image source")

        try:
            data = self._read_bytes(source)
            img = Image.open(io.BytesIO(data))
            img.load()
        except ImageDecodeFailure:
            raise
        except (OSError, ValueError, binascii.Error, requests.RequestException, Image.DecompressionBombError) as e:
            logger.warning("Image decode failed: %s", e)
            raise ImageDecodeFailure(source, e) from e

        if img.width <= 0 or img.height <= 0:
            raise ImageDecodeFailure(source, "image has no pixels")
        logger.debug("Loaded %dx%d %s image", img.width, img.height, img.mode)
        return img.convert('RGBA')

    def _read_bytes(self, source):
        """Raw encoded bytes for a source"""
        if isinstance(source, (bytes, bytearray)):
            return bytes(source)
        text = str(source)
        if text.startswith('data:'):
            return self._decode_data_url(text)
        scheme = urlparse(text).scheme.lower()
        if scheme in ('http', 'https'):
            return self._fetch(text)
        if scheme == 'file':
            return Path(unquote(urlparse(text).path)).read_bytes()
        return Path(text).read_bytes()

    @staticmethod
    def _decode_data_url(url):
        header, sep, payload = url.partition(',')
        if not sep:
            raise ValueError("malformed data URL")
        if header.endswith(';base64'):
            return base64.b64decode(payload, validate=True)
        return unquote(payload).encode('latin-1')

    def _fetch(self, url):
        getter = self._session.get if self._session is not None else requests.get
        response = getter(url, timeout=self.http_timeout)
        response.raise_for_status()
        return response.content


def image_to_data_url(img, fmt='PNG', mime='image/png'):
    """Encode a PIL image as a base64 data URL."""
    buffer = io.BytesIO()
    img.save(buffer, fmt)
    return f"data:{mime};base64,{base64.b64encode(buffer.getvalue()).decode('ascii')}"
