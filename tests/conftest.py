"""
Shared test configuration, fixtures, and markers for tilenav tests.
"""

import pytest

from tilenav.types import TileMatrix, TileMatrixSet, UrlTemplate


def pytest_configure(config):
    """Configure test markers."""
    config.addinivalue_line("markers", "property: marks property-based tests")
    config.addinivalue_line("markers", "unit: marks unit tests (fast, pure logic)")
    config.addinivalue_line("markers", "integration: marks integration tests")


CAPABILITIES_XML = """<?xml version="1.0" encoding="UTF-8"?>
<Capabilities xmlns="http://www.opengis.net/wmts/1.0"
              xmlns:ows="http://www.opengis.net/ows/1.1"
              version="1.0.0">
    <ows:ServiceIdentification>
        <ows:Title>Test WMTS</ows:Title>
    </ows:ServiceIdentification>
    <Contents>
        <Layer>
            <ows:Identifier>basemap</ows:Identifier>
            <TileMatrixSetLink>
                <TileMatrixSet>quad</TileMatrixSet>
            </TileMatrixSetLink>
            <ResourceURL format="image/png" resourceType="tile"
                         template="https://host/{TileMatrix}/{TileCol}/{TileRow}.png"/>
        </Layer>
        <TileMatrixSet>
            <ows:Identifier>quad</ows:Identifier>
            <ows:SupportedCRS>urn:ogc:def:crs:EPSG::3857</ows:SupportedCRS>
            <TileMatrix>
                <ows:Identifier>0</ows:Identifier>
                <ScaleDenominator>559082264.0287178</ScaleDenominator>
                <TopLeftCorner>-20037508.3427892 20037508.3427892</TopLeftCorner>
                <TileWidth>256</TileWidth>
                <TileHeight>256</TileHeight>
                <MatrixWidth>1</MatrixWidth>
                <MatrixHeight>1</MatrixHeight>
            </TileMatrix>
            <TileMatrix>
                <ows:Identifier>1</ows:Identifier>
                <ScaleDenominator>279541132.0143589</ScaleDenominator>
                <TopLeftCorner>-20037508.3427892 20037508.3427892</TopLeftCorner>
                <TileWidth>256</TileWidth>
                <TileHeight>256</TileHeight>
                <MatrixWidth>2</MatrixWidth>
                <MatrixHeight>2</MatrixHeight>
            </TileMatrix>
            <TileMatrix>
                <ows:Identifier>2</ows:Identifier>
                <ScaleDenominator>139770566.0071794</ScaleDenominator>
                <TopLeftCorner>-20037508.3427892 20037508.3427892</TopLeftCorner>
                <TileWidth>256</TileWidth>
                <TileHeight>256</TileHeight>
                <MatrixWidth>4</MatrixWidth>
                <MatrixHeight>4</MatrixHeight>
            </TileMatrix>
        </TileMatrixSet>
    </Contents>
</Capabilities>"""


def make_matrix_set(depth: int, tile_size: int = 256) -> TileMatrixSet:
    """Regular quad-tree with levels 0..depth-1."""
    return TileMatrixSet.from_matrices([
        TileMatrix(
            identifier=str(level),
            scale_denominator=559082264.0287178 / 2 ** level,
            top_left_corner=(-20037508.3427892, 20037508.3427892),
            tile_width=tile_size,
            tile_height=tile_size,
            matrix_width=2 ** level,
            matrix_height=2 ** level,
        )
        for level in range(depth)
    ])


@pytest.fixture
def capabilities_xml():
    """Namespaced capabilities document with three quad-tree levels."""
    return CAPABILITIES_XML


@pytest.fixture
def matrix_set():
    """Five-level regular quad-tree."""
    return make_matrix_set(5)


@pytest.fixture
def template():
    return UrlTemplate(template="https://host/{TileMatrix}/{TileCol}/{TileRow}.png")


@pytest.fixture
def matrix_set_factory():
    """Build regular quad-trees of a given depth."""
    return make_matrix_set
