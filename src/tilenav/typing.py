"""Type aliases and protocols for tilenav."""

from typing import TypeAlias, Protocol, Tuple

# Type aliases for better user experience
TileIndex: TypeAlias = Tuple[int, int]  # (row, column)
FocusRect: TypeAlias = Tuple[float, float, float, float]  # (x0, y0, x1, y1)


# Protocols for the collaborators that move bytes in and out of the core
class TileFetcher(Protocol):
    """Protocol for tile transports."""

    def __call__(self, address: str) -> bytes:
        """Fetch the raw bytes stored at a tile address."""
        ...


class TileDecoder(Protocol):
    """Protocol for tile image codecs."""

    def __call__(self, data: bytes) -> "TileImage":
        """Decode encoded image bytes into a pixel buffer."""
        ...


# Import types that are used in protocols
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from .types import TileImage
