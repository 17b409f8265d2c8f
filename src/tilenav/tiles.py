"""
Tile fetching and decoding for WMTS tile addresses.
"""

from io import BytesIO
from typing import Dict, Optional
import logging

import numpy as np
import requests
from PIL import Image, UnidentifiedImageError

from .errors import DecodeError, FetchError
from .types import Format, TileImage, TileRequest, TileResponse

logger = logging.getLogger(__name__)


def _failed(request: TileRequest, error: str, response=None) -> TileResponse:
    if response is None:
        return TileResponse(
            data=b'', content_type='', status_code=0, headers={},
            url=request.url, success=False, error_message=error,
        )
    return TileResponse(
        data=b'',
        content_type=response.headers.get('content-type', ''),
        status_code=response.status_code,
        headers=dict(response.headers),
        url=response.url or request.url,
        success=False,
        error_message=error,
    )


def fetch_tile(request: TileRequest, session: Optional[requests.Session] = None) -> TileResponse:
    """
    Fetch the tile stored at ``request.url``.

    Non-200 responses and network errors are retried ``request.retries``
    times. The last failure is reported in the returned response rather
    than raised.

    Args:
        request: Tile address and transport settings
        session: Optional HTTP session to issue the request with

    Returns:
        Tile response with data or error information

    Raises:
        ValueError: If the request has no address
    """
    if not request.url:
        raise ValueError("URL is required")

    http = session or requests
    headers = dict(request.headers or {})
    if request.output_format:
        headers.setdefault('Accept', request.output_format.value)

    attempts = request.retries + 1
    failure = _failed(request, "No attempt made")
    for attempt in range(1, attempts + 1):
        logger.debug("Fetching tile %s (attempt %d/%d)", request.url, attempt, attempts)
        try:
            response = http.get(request.url, headers=headers, timeout=request.timeout)
        except requests.RequestException as exc:
            logger.warning("Tile %s attempt %d failed: %s", request.url, attempt, exc)
            failure = _failed(request, f"Network error: {exc}")
            continue

        if response.status_code == 200:
            return TileResponse(
                data=response.content,
                content_type=response.headers.get('content-type', ''),
                status_code=response.status_code,
                headers=dict(response.headers),
                url=response.url or request.url,
                success=True,
            )

        error = f"HTTP {response.status_code}: {response.text[:200]}"
        logger.warning("Tile %s attempt %d failed: %s", request.url, attempt, error)
        failure = _failed(request, error, response)

    return failure


class HttpTileFetcher:
    """Fetch tile bytes over HTTP for a resolved tile address."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
        retries: int = 3,
        headers: Optional[Dict[str, str]] = None,
        output_format: Optional[Format] = None,
    ):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.retries = retries
        self.headers = dict(headers or {})
        self.output_format = output_format

    def __call__(self, address: str) -> bytes:
        request = TileRequest(
            url=address,
            headers=self.headers,
            timeout=self.timeout,
            retries=self.retries,
            output_format=self.output_format,
        )
        response = fetch_tile(request, session=self.session)
        if not response.success:
            raise FetchError(f"Failed to fetch tile {address}: {response.error_message}")
        return response.data


def decode_tile(data: bytes) -> TileImage:
    """
    Decode encoded tile bytes into an RGBA pixel buffer.

    Args:
        data: PNG, JPEG or TIFF encoded image

    Returns:
        TileImage with a (height, width, 4) uint8 array

    Raises:
        DecodeError: If the bytes are not a readable image
    """
    try:
        with BytesIO(bytes(data)) as bio:
            with Image.open(bio) as img:
                pixels = np.asarray(img.convert('RGBA'), dtype=np.uint8)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise DecodeError(f"Unable to decode tile image: {exc}", exc) from exc

    return TileImage(pixels=pixels)
