"""
Quad-tree cursor over a tile matrix set.

Levels are the integer values of the tile matrix identifiers. Level ``n + 1``
is expected to have twice as many rows and columns as level ``n``, so each
tile has four children and zooming in doubles the tile index.
"""

import logging

from .errors import AtBottomLevel, AtTopLevel, ConfigurationError, MissingLevel, OutOfBounds
from .types import (
    Direction,
    NavigationCommand,
    Pan,
    Quadrant,
    TileCursor,
    TileMatrix,
    TileMatrixSet,
    ZoomIn,
    ZoomOut,
)

logger = logging.getLogger(__name__)


class NavigationState:
    """Cursor identifying the displayed tile and the transitions between tiles."""

    def __init__(self, matrix_set: TileMatrixSet, start_level: int = 0):
        matrix = matrix_set.matrix_for_level(start_level)
        if matrix is None:
            raise ConfigurationError(f"Tile matrix set has no level {start_level}")
        if not matrix.contains(0, 0):
            raise ConfigurationError(f"Tile matrix '{matrix.identifier}' has no tiles")

        self.matrix_set = matrix_set
        self._level = start_level
        self._matrix = matrix
        self._row = 0
        self._column = 0

        problems = matrix_set.check_quadtree()
        for problem in problems:
            logger.warning("Tile matrix set is not a regular quad-tree: %s", problem)

    @property
    def level(self) -> int:
        return self._level

    @property
    def matrix(self) -> TileMatrix:
        return self._matrix

    @property
    def matrix_id(self) -> str:
        return self._matrix.identifier

    @property
    def row(self) -> int:
        return self._row

    @property
    def column(self) -> int:
        return self._column

    @property
    def cursor(self) -> TileCursor:
        return TileCursor(matrix_id=self.matrix_id, row=self._row, column=self._column)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def zoom_in(self, quadrant: Quadrant) -> TileCursor:
        """
        Descend into one quadrant of the current tile.

        Raises:
            AtTopLevel: If there is no finer tile matrix
            MissingLevel: If the next level is absent but finer ones exist
            OutOfBounds: If the child tile is outside the finer matrix
        """
        target = self.matrix_set.matrix_for_level(self._level + 1)
        if target is None:
            if any(level > self._level for level in self.matrix_set.levels()):
                raise MissingLevel(self._level + 1)
            raise AtTopLevel()

        row_off, col_off = quadrant.offset
        return self._commit(
            self._level + 1,
            target,
            2 * self._row + row_off,
            2 * self._column + col_off,
        )

    def zoom_out(self) -> TileCursor:
        """
        Move to the parent of the current tile.

        Raises:
            AtBottomLevel: If the cursor is at level 0
            MissingLevel: If the parent level is absent from the set
            OutOfBounds: If the parent tile is outside the coarser matrix
        """
        if self._level == 0:
            raise AtBottomLevel()

        target = self.matrix_set.matrix_for_level(self._level - 1)
        if target is None:
            raise MissingLevel(self._level - 1)

        return self._commit(self._level - 1, target, self._row // 2, self._column // 2)

    def pan(self, direction: Direction) -> TileCursor:
        """
        Move to the adjacent tile at the same level.

        Raises:
            OutOfBounds: If the neighbour is outside the current matrix
        """
        d_row, d_col = direction.delta
        return self._commit(self._level, self._matrix, self._row + d_row, self._column + d_col)

    def apply(self, command: NavigationCommand) -> TileCursor:
        """Apply a navigation command value."""
        if isinstance(command, ZoomIn):
            return self.zoom_in(command.quadrant)
        if isinstance(command, ZoomOut):
            return self.zoom_out()
        if isinstance(command, Pan):
            return self.pan(command.direction)
        raise TypeError(f"Unsupported navigation command: {command!r}")

    def _commit(self, level: int, matrix: TileMatrix, row: int, column: int) -> TileCursor:
        if not matrix.contains(row, column):
            raise OutOfBounds(matrix.identifier, row, column)

        self._level = level
        self._matrix = matrix
        self._row = row
        self._column = column
        logger.debug("Cursor moved to matrix %s row %d col %d", matrix.identifier, row, column)
        return self.cursor

    def __repr__(self) -> str:
        return (
            f"NavigationState(matrix_id={self.matrix_id!r}, "
            f"row={self._row}, column={self._column})"
        )
