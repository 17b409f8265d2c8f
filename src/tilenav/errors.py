"""Custom exception hierarchy for tilenav."""

from typing import Optional


class TileNavError(Exception):
    """Base exception for tilenav library."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


class ParseError(TileNavError):
    """Capabilities document parsing errors."""
    pass


class XMLSyntaxError(ParseError):
    """The capabilities document is not well-formed XML."""
    pass


class MissingElement(ParseError):
    """A structurally required element is absent from the document."""

    def __init__(self, name: str, cause: Optional[Exception] = None):
        super().__init__(f"Required element '{name}' not found", cause)
        self.name = name


class InvalidNumber(ParseError):
    """A numeric field of a tile matrix could not be parsed."""

    def __init__(self, field: str, value: str, cause: Optional[Exception] = None):
        super().__init__(f"Invalid number for '{field}': {value!r}", cause)
        self.field = field
        self.value = value


class NavigationError(TileNavError):
    """A navigation command could not be applied to the cursor."""
    pass


class AtBottomLevel(NavigationError):
    """Zoom out requested while already at the coarsest level."""

    def __init__(self, message: str = "Already at the coarsest zoom level"):
        super().__init__(message)


class AtTopLevel(NavigationError):
    """Zoom in requested while already at the finest level."""

    def __init__(self, message: str = "Already at the finest zoom level"):
        super().__init__(message)


class MissingLevel(NavigationError):
    """The target level lies in a gap of the tile matrix set."""

    def __init__(self, level: int):
        super().__init__(f"No tile matrix for level {level}")
        self.level = level


class OutOfBounds(NavigationError):
    """The target tile lies outside its tile matrix."""

    def __init__(self, matrix_id: str, row: int, column: int):
        super().__init__(
            f"Tile (row={row}, col={column}) is outside tile matrix '{matrix_id}'"
        )
        self.matrix_id = matrix_id
        self.row = row
        self.column = column


class FetchError(TileNavError):
    """Network-related errors while fetching a tile or document."""
    pass


class DecodeError(TileNavError):
    """Tile image bytes could not be decoded."""
    pass


class ConfigurationError(TileNavError):
    """Configuration and setup errors."""
    pass
