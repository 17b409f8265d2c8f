"""
Tests for tilenav.ogc.wmts module.

Tests capabilities parsing and retrieval.
"""

import xml.etree.ElementTree as ET
from unittest.mock import MagicMock

import pytest
import requests

from tilenav.errors import FetchError, InvalidNumber, MissingElement, ParseError, XMLSyntaxError
from tilenav.ogc.wmts import WMTSClient, WMTSParser, load_capabilities, parse_tile_matrix
from tilenav.types import TileMatrix


def _matrix_xml(identifier="0", tile_width="256", extra=""):
    return f"""
        <TileMatrix>
            <Identifier>{identifier}</Identifier>
            <ScaleDenominator>559082264.0287178</ScaleDenominator>
            <TopLeftCorner>-20037508.34 20037508.34</TopLeftCorner>
            <TileWidth>{tile_width}</TileWidth>
            <TileHeight>256</TileHeight>
            <MatrixWidth>1</MatrixWidth>
            <MatrixHeight>1</MatrixHeight>{extra}
        </TileMatrix>"""


def _document(matrices, template="https://host/{TileMatrix}/{TileCol}/{TileRow}.png"):
    return f"""<Capabilities>
    <Contents>
        <Layer>
            <ResourceURL template="{template}"/>
        </Layer>
        <TileMatrixSet>{''.join(matrices)}
        </TileMatrixSet>
    </Contents>
</Capabilities>"""


class TestParseTileMatrix:
    """Test TileMatrix element parsing."""

    def test_parses_all_fields(self):
        element = ET.fromstring(_matrix_xml())
        matrix = parse_tile_matrix(element)

        assert matrix == TileMatrix(
            identifier="0",
            scale_denominator=559082264.0287178,
            top_left_corner=(-20037508.34, 20037508.34),
            tile_width=256,
            tile_height=256,
            matrix_width=1,
            matrix_height=1,
        )

    def test_field_order_does_not_matter(self):
        element = ET.fromstring("""
            <TileMatrix>
                <MatrixHeight>4</MatrixHeight>
                <TileWidth>512</TileWidth>
                <TopLeftCorner>1.5 2.5</TopLeftCorner>
                <Identifier>2</Identifier>
                <MatrixWidth>8</MatrixWidth>
                <ScaleDenominator>1000</ScaleDenominator>
                <TileHeight>256</TileHeight>
            </TileMatrix>""")

        matrix = parse_tile_matrix(element)

        assert matrix.identifier == "2"
        assert matrix.tile_width == 512
        assert matrix.tile_height == 256
        assert matrix.matrix_width == 8
        assert matrix.matrix_height == 4
        assert matrix.top_left_corner == (1.5, 2.5)
        assert matrix.scale_denominator == 1000.0

    def test_namespaced_children(self):
        element = ET.fromstring("""
            <wmts:TileMatrix xmlns:wmts="http://www.opengis.net/wmts/1.0"
                             xmlns:ows="http://www.opengis.net/ows/1.1">
                <ows:Identifier>3</ows:Identifier>
                <wmts:MatrixWidth>8</wmts:MatrixWidth>
            </wmts:TileMatrix>""")

        matrix = parse_tile_matrix(element)

        assert matrix.identifier == "3"
        assert matrix.matrix_width == 8

    def test_unknown_and_empty_children_are_skipped(self):
        element = ET.fromstring("""
            <TileMatrix>
                <Identifier>1</Identifier>
                <Abstract>ignored</Abstract>
                <TileWidth></TileWidth>
                <TileHeight/>
            </TileMatrix>""")

        matrix = parse_tile_matrix(element)

        assert matrix.identifier == "1"
        assert matrix.tile_width == 0
        assert matrix.tile_height == 0

    def test_whitespace_only_number_is_invalid(self):
        element = ET.fromstring(
            "<TileMatrix><Identifier>1</Identifier><TileWidth>   </TileWidth></TileMatrix>"
        )

        with pytest.raises(InvalidNumber) as exc_info:
            parse_tile_matrix(element)

        assert exc_info.value.field == "TileWidth"
        assert exc_info.value.value == "   "

    def test_numbers_are_stripped(self):
        element = ET.fromstring(
            "<TileMatrix><TileWidth> 256\n</TileWidth><ScaleDenominator> 1.5 </ScaleDenominator></TileMatrix>"
        )

        matrix = parse_tile_matrix(element)

        assert matrix.tile_width == 256
        assert matrix.scale_denominator == 1.5

    @pytest.mark.parametrize(
        "text", ["2_56", "٢٥٦", "99999999999999999999", "4294967296", "-0", "0x100", "2.5", "1e3"]
    )
    def test_count_must_be_unsigned_32_bit_decimal(self, text):
        element = ET.fromstring(_matrix_xml(tile_width=text))

        with pytest.raises(InvalidNumber) as exc_info:
            parse_tile_matrix(element)

        assert exc_info.value.field == "TileWidth"
        assert exc_info.value.value == text

    @pytest.mark.parametrize("text,expected", [("+256", 256), ("0", 0), ("4294967295", 2 ** 32 - 1)])
    def test_count_limits(self, text, expected):
        element = ET.fromstring(_matrix_xml(tile_width=text))

        assert parse_tile_matrix(element).tile_width == expected

    @pytest.mark.parametrize("text", ["1_000.5", "١.5", "   "])
    def test_invalid_scale_denominator(self, text):
        element = ET.fromstring(f"<TileMatrix><ScaleDenominator>{text}</ScaleDenominator></TileMatrix>")

        with pytest.raises(InvalidNumber, match="ScaleDenominator"):
            parse_tile_matrix(element)

    def test_whitespace_only_top_left_corner_is_invalid(self):
        element = ET.fromstring("<TileMatrix><TopLeftCorner> </TopLeftCorner></TileMatrix>")

        with pytest.raises(InvalidNumber, match="TopLeftCorner"):
            parse_tile_matrix(element)

    def test_invalid_tile_width(self):
        element = ET.fromstring(_matrix_xml(tile_width="wide"))

        with pytest.raises(InvalidNumber) as exc_info:
            parse_tile_matrix(element)

        assert exc_info.value.field == "TileWidth"
        assert exc_info.value.value == "wide"

    def test_negative_count_is_invalid(self):
        element = ET.fromstring(_matrix_xml(tile_width="-256"))

        with pytest.raises(InvalidNumber, match="TileWidth"):
            parse_tile_matrix(element)

    def test_invalid_top_left_corner(self):
        element = ET.fromstring("<TileMatrix><TopLeftCorner>1.0 north</TopLeftCorner></TileMatrix>")

        with pytest.raises(InvalidNumber) as exc_info:
            parse_tile_matrix(element)

        assert exc_info.value.field == "TopLeftCorner"
        assert exc_info.value.value == "north"

    def test_top_left_corner_with_too_many_values(self):
        element = ET.fromstring("<TileMatrix><TopLeftCorner>1 2 3</TopLeftCorner></TileMatrix>")

        with pytest.raises(InvalidNumber, match="TopLeftCorner"):
            parse_tile_matrix(element)

    def test_top_left_corner_single_value(self):
        element = ET.fromstring("<TileMatrix><TopLeftCorner>7.5</TopLeftCorner></TileMatrix>")

        assert parse_tile_matrix(element).top_left_corner == (7.5, 0.0)


class TestWMTSParser:
    """Test WMTS capabilities parsing."""

    def test_parses_namespaced_document(self, capabilities_xml):
        capabilities = WMTSParser().parse_get_capabilities(capabilities_xml)

        assert capabilities.template.template == "https://host/{TileMatrix}/{TileCol}/{TileRow}.png"
        assert capabilities.matrix_set.identifiers() == ["0", "1", "2"]
        assert capabilities.matrix_set["2"].matrix_width == 4
        assert capabilities.errors == []

    def test_accepts_bytes(self, capabilities_xml):
        capabilities = WMTSParser().parse_get_capabilities(capabilities_xml.encode("utf-8"))

        assert len(capabilities.matrix_set) == 3

    def test_end_to_end_initial_address(self):
        xml = _document([_matrix_xml("0")])
        capabilities = WMTSParser().parse_get_capabilities(xml)

        matrix = capabilities.matrix_set["0"]
        assert (matrix.matrix_width, matrix.matrix_height) == (1, 1)
        assert (matrix.tile_width, matrix.tile_height) == (256, 256)
        assert capabilities.template.resolve("0", 0, 0) == "https://host/0/0/0.png"

    def test_invalid_matrix_is_skipped(self):
        xml = _document([_matrix_xml("0"), _matrix_xml("1", tile_width="abc"), _matrix_xml("2")])

        capabilities = WMTSParser().parse_get_capabilities(xml)

        assert "1" not in capabilities.matrix_set
        assert "0" in capabilities.matrix_set
        assert "2" in capabilities.matrix_set
        assert len(capabilities.errors) == 1
        error = capabilities.errors[0]
        assert isinstance(error, InvalidNumber)
        assert error.field == "TileWidth"
        assert error.value == "abc"

    def test_duplicate_identifiers_last_wins(self):
        xml = _document([_matrix_xml("0", tile_width="256"), _matrix_xml("0", tile_width="512")])

        capabilities = WMTSParser().parse_get_capabilities(xml)

        assert len(capabilities.matrix_set) == 1
        assert capabilities.matrix_set["0"].tile_width == 512

    def test_only_tile_matrix_children_are_read(self):
        xml = _document(["<Identifier>quad</Identifier>", _matrix_xml("0")])

        capabilities = WMTSParser().parse_get_capabilities(xml)

        assert capabilities.matrix_set.identifiers() == ["0"]

    def test_malformed_xml(self):
        with pytest.raises(XMLSyntaxError, match="Invalid XML"):
            WMTSParser().parse_get_capabilities("<Capabilities><Contents>")

    def test_missing_contents(self):
        with pytest.raises(MissingElement) as exc_info:
            WMTSParser().parse_get_capabilities("<Capabilities><Other/></Capabilities>")

        assert exc_info.value.name == "Contents"

    def test_missing_resource_url(self):
        xml = "<Capabilities><Contents><TileMatrixSet/></Contents></Capabilities>"

        with pytest.raises(MissingElement) as exc_info:
            WMTSParser().parse_get_capabilities(xml)

        assert exc_info.value.name == "ResourceURL"

    def test_missing_template_attribute(self):
        xml = "<Capabilities><Contents><ResourceURL/><TileMatrixSet/></Contents></Capabilities>"

        with pytest.raises(MissingElement, match="template"):
            WMTSParser().parse_get_capabilities(xml)

    def test_missing_tile_matrix_set(self):
        xml = '<Capabilities><Contents><Layer><ResourceURL template="x"/></Layer></Contents></Capabilities>'

        with pytest.raises(MissingElement) as exc_info:
            WMTSParser().parse_get_capabilities(xml)

        assert exc_info.value.name == "TileMatrixSet"

    def test_structural_errors_are_parse_errors(self):
        with pytest.raises(ParseError):
            WMTSParser().parse_get_capabilities("<Capabilities/>")


class TestWMTSClient:
    """Test capabilities retrieval."""

    def test_get_capabilities(self, capabilities_xml):
        session = MagicMock()
        response = MagicMock()
        response.content = capabilities_xml.encode("utf-8")
        response.raise_for_status.return_value = None
        session.get.return_value = response

        client = WMTSClient("https://host/WMTSCapabilities.xml", session=session, timeout=5)
        capabilities = client.get_capabilities()

        session.get.assert_called_once_with(
            "https://host/WMTSCapabilities.xml", headers={}, timeout=5
        )
        assert len(capabilities.matrix_set) == 3

    def test_http_error_becomes_fetch_error(self):
        session = MagicMock()
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("404 Not Found")
        session.get.return_value = response

        client = WMTSClient("https://host/WMTSCapabilities.xml", session=session)

        with pytest.raises(FetchError, match="404"):
            client.get_capabilities()

    def test_load_capabilities_from_path(self, tmp_path, capabilities_xml):
        path = tmp_path / "WMTSCapabilities.xml"
        path.write_text(capabilities_xml, encoding="utf-8")

        capabilities = load_capabilities(str(path))

        assert capabilities.matrix_set.levels() == [0, 1, 2]

    def test_load_capabilities_missing_file(self, tmp_path):
        with pytest.raises(FetchError):
            load_capabilities(str(tmp_path / "missing.xml"))

    def test_load_capabilities_from_url(self, capabilities_xml):
        session = MagicMock()
        response = MagicMock()
        response.content = capabilities_xml.encode("utf-8")
        session.get.return_value = response

        capabilities = load_capabilities("http://host/wmts", session=session)

        assert session.get.called
        assert "0" in capabilities.matrix_set
