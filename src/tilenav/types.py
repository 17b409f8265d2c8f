"""
Type definitions and models for WMTS tile navigation.
"""

from typing import Dict, List, Literal, Optional, Tuple, Union
from enum import Enum

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidNumber
from .typing import FocusRect, TileIndex

# OGC standardized rendering pixel size in metres
PIXEL_SIZE = 0.28e-3

TILE_MATRIX_PLACEHOLDER = "{TileMatrix}"
TILE_COL_PLACEHOLDER = "{TileCol}"
TILE_ROW_PLACEHOLDER = "{TileRow}"


class Format(str, Enum):
    """Tile image formats."""
    PNG = "image/png"
    JPEG = "image/jpeg"


class Quadrant(str, Enum):
    """One of the four sub-tiles of a tile, split at its midlines."""
    NE = "NE"
    NW = "NW"
    SW = "SW"
    SE = "SE"

    @property
    def offset(self) -> TileIndex:
        """(row, column) offset of the child tile inside the doubled grid."""
        return _QUADRANT_OFFSETS[self]

    def focus_rect(self, tile_width: float, tile_height: float) -> FocusRect:
        """
        Screen rectangle covered by this quadrant of a displayed tile.

        Args:
            tile_width: Displayed tile width in pixels
            tile_height: Displayed tile height in pixels

        Returns:
            (x0, y0, x1, y1) with the origin at the top-left of the tile
        """
        row_off, col_off = self.offset
        half_w = tile_width / 2.0
        half_h = tile_height / 2.0
        x0 = col_off * half_w
        y0 = row_off * half_h
        return (x0, y0, x0 + half_w, y0 + half_h)


_QUADRANT_OFFSETS: Dict[Quadrant, TileIndex] = {
    Quadrant.NW: (0, 0),
    Quadrant.NE: (0, 1),
    Quadrant.SW: (1, 0),
    Quadrant.SE: (1, 1),
}


class Direction(str, Enum):
    """Pan directions."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def delta(self) -> TileIndex:
        """(row, column) step for this direction."""
        return _DIRECTION_DELTAS[self]


_DIRECTION_DELTAS: Dict[Direction, TileIndex] = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
}


class TileMatrix(BaseModel):
    """One zoom level of a tile pyramid."""

    identifier: str = Field("", description="Tile matrix identifier")
    scale_denominator: float = Field(0.0, description="Map scale denominator at this level")
    top_left_corner: Tuple[float, float] = Field(
        (0.0, 0.0), description="CRS coordinates of the top-left corner of tile (0, 0)"
    )
    tile_width: int = Field(0, ge=0, description="Tile width in pixels")
    tile_height: int = Field(0, ge=0, description="Tile height in pixels")
    matrix_width: int = Field(0, ge=0, description="Number of tile columns")
    matrix_height: int = Field(0, ge=0, description="Number of tile rows")

    model_config = ConfigDict(frozen=True)

    @property
    def level(self) -> Optional[int]:
        """Identifier as a pyramid level, or None when it is not integer text."""
        text = self.identifier.strip()
        if not (text.isascii() and text.isdigit()):
            return None
        return int(text)

    @property
    def pixel_span(self) -> float:
        """CRS units covered by one pixel, assuming a metre-based CRS."""
        return self.scale_denominator * PIXEL_SIZE

    def contains(self, row: int, column: int) -> bool:
        """Check whether a tile index lies inside this matrix."""
        return 0 <= row < self.matrix_height and 0 <= column < self.matrix_width

    def tile_origin(self, row: int, column: int) -> Tuple[float, float]:
        """CRS coordinates of the top-left corner of a tile."""
        x_min, y_max = self.top_left_corner
        x = x_min + column * self.tile_width * self.pixel_span
        y = y_max - row * self.tile_height * self.pixel_span
        return x, y


class TileMatrixSet(BaseModel):
    """Tile matrices keyed by identifier."""

    matrices: Dict[str, TileMatrix] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_matrices(cls, matrices: List[TileMatrix]) -> "TileMatrixSet":
        """Build a set from matrices in document order; later duplicates win."""
        mapping: Dict[str, TileMatrix] = {}
        for matrix in matrices:
            mapping[matrix.identifier] = matrix
        return cls(matrices=mapping)

    def __getitem__(self, identifier: str) -> TileMatrix:
        return self.matrices[identifier]

    def __contains__(self, identifier: object) -> bool:
        return identifier in self.matrices

    def __len__(self) -> int:
        return len(self.matrices)

    def get(self, identifier: str) -> Optional[TileMatrix]:
        return self.matrices.get(identifier)

    def identifiers(self) -> List[str]:
        return list(self.matrices)

    def matrix_for_level(self, level: int) -> Optional[TileMatrix]:
        """Look up the matrix whose identifier encodes ``level``."""
        matrix = self.matrices.get(str(level))
        if matrix is not None:
            return matrix
        # identifiers such as "00" still encode a level
        for candidate in self.matrices.values():
            if candidate.level == level:
                return candidate
        return None

    def levels(self) -> List[int]:
        """Sorted integer levels present in the set."""
        return sorted({m.level for m in self.matrices.values() if m.level is not None})

    def check_quadtree(self) -> List[str]:
        """
        Check that consecutive levels follow the quad-tree doubling convention.

        Returns:
            Human-readable problems; empty when the set is consistent
        """
        problems: List[str] = []
        levels = self.levels()
        if not levels:
            return ["No integer tile matrix identifiers"]
        if levels[0] != 0:
            problems.append(f"Lowest level is {levels[0]}, expected 0")

        for lower, upper in zip(levels, levels[1:]):
            if upper != lower + 1:
                problems.append(f"Levels {lower} and {upper} are not consecutive")
                continue
            parent = self.matrix_for_level(lower)
            child = self.matrix_for_level(upper)
            if child.matrix_width != 2 * parent.matrix_width:
                problems.append(
                    f"Level {upper} is {child.matrix_width} tiles wide, "
                    f"expected {2 * parent.matrix_width}"
                )
            if child.matrix_height != 2 * parent.matrix_height:
                problems.append(
                    f"Level {upper} is {child.matrix_height} tiles high, "
                    f"expected {2 * parent.matrix_height}"
                )
        return problems


class UrlTemplate(BaseModel):
    """
    Tile address template from a WMTS ``ResourceURL`` element.

    Substitution is literal; a template missing a placeholder yields an
    address with that part left untouched.
    """

    template: str

    model_config = ConfigDict(frozen=True)

    def resolve(self, matrix_id: str, column: int, row: int) -> str:
        """
        Build the address of a single tile.

        Args:
            matrix_id: Tile matrix identifier
            column: Tile column index
            row: Tile row index

        Returns:
            Tile address
        """
        address = self.template.replace(TILE_MATRIX_PLACEHOLDER, matrix_id)
        address = address.replace(TILE_COL_PLACEHOLDER, str(column))
        return address.replace(TILE_ROW_PLACEHOLDER, str(row))


class WMTSCapabilities(BaseModel):
    """Result of parsing a WMTS capabilities document."""

    template: UrlTemplate
    matrix_set: TileMatrixSet
    errors: List[InvalidNumber] = Field(
        default_factory=list, description="Tile matrices skipped because of bad numeric fields"
    )

    model_config = ConfigDict(arbitrary_types_allowed=True)


class TileCursor(BaseModel):
    """Position of the displayed tile in the pyramid."""

    matrix_id: str = "0"
    row: int = Field(0, ge=0)
    column: int = Field(0, ge=0)

    model_config = ConfigDict(frozen=True)


class ZoomIn(BaseModel):
    kind: Literal["zoom_in"] = "zoom_in"
    quadrant: Quadrant

    model_config = ConfigDict(frozen=True)


class ZoomOut(BaseModel):
    kind: Literal["zoom_out"] = "zoom_out"

    model_config = ConfigDict(frozen=True)


class Pan(BaseModel):
    kind: Literal["pan"] = "pan"
    direction: Direction

    model_config = ConfigDict(frozen=True)


NavigationCommand = Union[ZoomIn, ZoomOut, Pan]


class TileRequest(BaseModel):
    """Tile request parameters."""

    url: str
    headers: Optional[Dict[str, str]] = None
    timeout: int = 30
    retries: int = 3
    output_format: Optional[Format] = None


class TileResponse(BaseModel):
    """Response from tile request."""
    data: bytes
    content_type: str
    status_code: int
    headers: Dict[str, str]
    url: str
    success: bool
    error_message: Optional[str] = None


class TileImage(BaseModel):
    """Decoded tile as an RGBA pixel buffer."""

    pixels: np.ndarray = Field(..., description="Pixel array of shape (height, width, 4)")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])


class TileTicket(BaseModel):
    """Address of a tile tagged with the cursor version that produced it."""

    address: str
    cursor: TileCursor
    version: int

    model_config = ConfigDict(frozen=True)
