"""
WMTS (Web Map Tile Service) capabilities parsing and retrieval.
"""

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union
from urllib.parse import urlparse

import requests

from ..errors import FetchError, InvalidNumber, MissingElement, XMLSyntaxError
from ..types import TileMatrix, TileMatrixSet, UrlTemplate, WMTSCapabilities

logger = logging.getLogger(__name__)


def _local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix ElementTree puts on qualified tags."""
    return tag.rsplit('}', 1)[-1]


# Unsigned 32-bit decimal, as WMTS declares tile sizes and matrix extents
_COUNT_PATTERN = re.compile(r'\+?[0-9]+')
_COUNT_MAX = 2 ** 32 - 1


def _parse_float(field: str, text: str) -> float:
    value = text.strip()
    # float() also takes digit separators and non-ASCII digits
    if '_' in value or not value.isascii():
        raise InvalidNumber(field, text)
    try:
        return float(value)
    except ValueError as exc:
        raise InvalidNumber(field, text, exc) from exc


def _parse_count(field: str, text: str) -> int:
    value = text.strip()
    if not _COUNT_PATTERN.fullmatch(value):
        raise InvalidNumber(field, text)
    count = int(value)
    if count > _COUNT_MAX:
        raise InvalidNumber(field, text)
    return count


def _parse_corner(field: str, text: str) -> Tuple[float, float]:
    parts = text.split()
    if not parts or len(parts) > 2:
        raise InvalidNumber(field, text)
    corner = [0.0, 0.0]
    for i, part in enumerate(parts):
        corner[i] = _parse_float(field, part)
    return corner[0], corner[1]


def _parse_identifier(field: str, text: str) -> str:
    return text.strip()


# Tag name -> (TileMatrix attribute, converter)
_TILE_MATRIX_FIELDS: Dict[str, Tuple[str, Callable[[str, str], object]]] = {
    'Identifier': ('identifier', _parse_identifier),
    'ScaleDenominator': ('scale_denominator', _parse_float),
    'TopLeftCorner': ('top_left_corner', _parse_corner),
    'TileWidth': ('tile_width', _parse_count),
    'TileHeight': ('tile_height', _parse_count),
    'MatrixWidth': ('matrix_width', _parse_count),
    'MatrixHeight': ('matrix_height', _parse_count),
}


def parse_tile_matrix(element: ET.Element) -> TileMatrix:
    """
    Build a TileMatrix from a ``<TileMatrix>`` element.

    Children may appear in any order. Children without text are skipped and unknown
    children are ignored. Numeric text is stripped before conversion, so a
    whitespace-only number is invalid.

    Args:
        element: The TileMatrix XML element

    Returns:
        TileMatrix object

    Raises:
        InvalidNumber: If a numeric child cannot be parsed
    """
    values: Dict[str, object] = {}
    for child in element:
        if not isinstance(child.tag, str):
            continue
        name = _local_name(child.tag)
        text = child.text
        if not text:
            continue

        entry = _TILE_MATRIX_FIELDS.get(name)
        if entry is None:
            logger.debug("Ignoring unexpected TileMatrix element '%s'", name)
            continue

        attribute, converter = entry
        values[attribute] = converter(name, text)

    return TileMatrix(**values)


class WMTSParser:
    """Parser for WMTS capabilities documents."""

    def parse_get_capabilities(self, xml_content: Union[str, bytes]) -> WMTSCapabilities:
        """
        Parse a WMTS GetCapabilities document.

        The tile address template comes from the first ``ResourceURL`` below
        ``Contents`` and the tile matrices from the first ``TileMatrixSet``
        child of ``Contents``. A tile matrix with a malformed number is
        skipped and reported in ``WMTSCapabilities.errors``.

        Args:
            xml_content: XML content as string or bytes

        Returns:
            WMTSCapabilities object

        Raises:
            XMLSyntaxError: If the document is not well-formed
            MissingElement: If Contents, ResourceURL or TileMatrixSet is absent
        """
        try:
            root = ET.fromstring(xml_content)
        except ET.ParseError as exc:
            raise XMLSyntaxError(f"Invalid XML content: {exc}", exc) from exc

        contents = self._find_child(root, 'Contents')
        if contents is None:
            raise MissingElement('Contents')

        resource_url = self._find_descendant(contents, 'ResourceURL')
        if resource_url is None:
            raise MissingElement('ResourceURL')
        template = resource_url.get('template')
        if template is None:
            raise MissingElement('ResourceURL@template')

        matrix_set_elem = self._find_child(contents, 'TileMatrixSet')
        if matrix_set_elem is None:
            raise MissingElement('TileMatrixSet')

        matrices, errors = self._parse_tile_matrices(matrix_set_elem)

        logger.debug(
            "Parsed %d tile matrices (%d skipped) with template %s",
            len(matrices), len(errors), template
        )
        return WMTSCapabilities(
            template=UrlTemplate(template=template),
            matrix_set=TileMatrixSet.from_matrices(matrices),
            errors=errors,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _parse_tile_matrices(
        self, matrix_set_elem: ET.Element
    ) -> Tuple[List[TileMatrix], List[InvalidNumber]]:
        matrices: List[TileMatrix] = []
        errors: List[InvalidNumber] = []
        for child in matrix_set_elem:
            if not isinstance(child.tag, str) or _local_name(child.tag) != 'TileMatrix':
                continue
            try:
                matrices.append(parse_tile_matrix(child))
            except InvalidNumber as exc:
                logger.warning("Skipping tile matrix: %s", exc)
                errors.append(exc)
        return matrices, errors

    def _find_child(self, element: ET.Element, local_name: str) -> Optional[ET.Element]:
        for child in element:
            if isinstance(child.tag, str) and _local_name(child.tag) == local_name:
                return child
        return None

    def _find_descendant(self, element: ET.Element, local_name: str) -> Optional[ET.Element]:
        for child in element.iter():
            if isinstance(child.tag, str) and _local_name(child.tag) == local_name:
                return child
        return None


class WMTSClient:
    """Client for retrieving WMTS capabilities."""

    def __init__(
        self,
        capabilities_url: str,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize WMTS client.

        Args:
            capabilities_url: URL of the GetCapabilities document
            session: Optional pre-configured HTTP session
            timeout: Request timeout in seconds
            headers: Additional HTTP headers to send
        """
        self.capabilities_url = capabilities_url
        self.session = session or requests.Session()
        self.timeout = timeout
        self.headers = dict(headers or {})
        self.parser = WMTSParser()

    def get_capabilities(self) -> WMTSCapabilities:
        """
        Download and parse the capabilities document.

        Returns:
            WMTSCapabilities object

        Raises:
            FetchError: If the document cannot be downloaded
        """
        logger.info("Fetching WMTS capabilities from %s", self.capabilities_url)
        try:
            response = self.session.get(
                self.capabilities_url, headers=self.headers, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise FetchError(
                f"Failed to fetch capabilities from {self.capabilities_url}: {exc}", exc
            ) from exc

        return self.parser.parse_get_capabilities(response.content)


def load_capabilities(
    location: str,
    session: Optional[requests.Session] = None,
    timeout: int = 30,
    headers: Optional[Dict[str, str]] = None,
) -> WMTSCapabilities:
    """
    Load capabilities from an HTTP(S) URL or a local file path.

    Args:
        location: URL or filesystem path of the capabilities document
        session: Optional HTTP session used for URLs
        timeout: Request timeout in seconds
        headers: Additional HTTP headers used for URLs

    Returns:
        WMTSCapabilities object
    """
    if urlparse(location).scheme in ('http', 'https'):
        client = WMTSClient(location, session=session, timeout=timeout, headers=headers)
        return client.get_capabilities()

    path = Path(location)
    logger.info("Reading WMTS capabilities from %s", path)
    try:
        content = path.read_bytes()
    except OSError as exc:
        raise FetchError(f"Failed to read capabilities from {path}: {exc}", exc) from exc
    return WMTSParser().parse_get_capabilities(content)
