"""tilenav - step through the tile pyramid of a WMTS service."""

from ._version import __version__

from .config import NavigatorConfig
from .coordinator import TileCoordinator
from .errors import (
    AtBottomLevel,
    AtTopLevel,
    ConfigurationError,
    DecodeError,
    FetchError,
    InvalidNumber,
    MissingElement,
    MissingLevel,
    NavigationError,
    OutOfBounds,
    ParseError,
    TileNavError,
    XMLSyntaxError,
)
from .keymap import command_for_key
from .navigation import NavigationState
from .ogc import WMTSClient, WMTSParser, load_capabilities
from .tiles import HttpTileFetcher, decode_tile, fetch_tile
from .types import (
    Direction,
    Format,
    NavigationCommand,
    Pan,
    Quadrant,
    TileCursor,
    TileImage,
    TileMatrix,
    TileMatrixSet,
    TileRequest,
    TileResponse,
    TileTicket,
    UrlTemplate,
    WMTSCapabilities,
    ZoomIn,
    ZoomOut,
)

__all__ = [
    "__version__",
    "NavigatorConfig",
    "TileCoordinator",
    "AtBottomLevel",
    "AtTopLevel",
    "ConfigurationError",
    "DecodeError",
    "FetchError",
    "InvalidNumber",
    "MissingElement",
    "MissingLevel",
    "NavigationError",
    "OutOfBounds",
    "ParseError",
    "TileNavError",
    "XMLSyntaxError",
    "command_for_key",
    "NavigationState",
    "WMTSClient",
    "WMTSParser",
    "load_capabilities",
    "HttpTileFetcher",
    "decode_tile",
    "fetch_tile",
    "Direction",
    "Format",
    "NavigationCommand",
    "Pan",
    "Quadrant",
    "TileCursor",
    "TileImage",
    "TileMatrix",
    "TileMatrixSet",
    "TileRequest",
    "TileResponse",
    "TileTicket",
    "UrlTemplate",
    "WMTSCapabilities",
    "ZoomIn",
    "ZoomOut",
]
