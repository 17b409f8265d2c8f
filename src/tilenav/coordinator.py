"""Session orchestration: cursor, tile addresses and stale-tile rejection."""

import logging
from typing import Optional

from .errors import ConfigurationError
from .navigation import NavigationState
from .types import (
    NavigationCommand,
    TileCursor,
    TileImage,
    TileMatrix,
    TileMatrixSet,
    TileTicket,
    UrlTemplate,
    WMTSCapabilities,
)
from .typing import TileDecoder, TileFetcher

logger = logging.getLogger(__name__)


class TileCoordinator:
    """
    Owns the tile matrix set, address template and cursor of one browsing session.

    Every successful navigation bumps ``version``. A tile fetched for an
    older version is discarded on delivery, so a slow response for a tile
    the user already navigated away from never replaces the current one.
    The coordinator performs no I/O itself; ``load`` runs the supplied
    fetcher and decoder.
    """

    def __init__(self, matrix_set: TileMatrixSet, template: UrlTemplate):
        if len(matrix_set) == 0:
            raise ConfigurationError("Tile matrix set is empty")
        self.matrix_set = matrix_set
        self.template = template
        self.navigation = NavigationState(matrix_set)
        self.version = 0
        self.image: Optional[TileImage] = None
        self._address: Optional[str] = None

    @classmethod
    def from_capabilities(cls, capabilities: WMTSCapabilities) -> "TileCoordinator":
        """Create a coordinator from a parsed capabilities document."""
        return cls(capabilities.matrix_set, capabilities.template)

    @property
    def cursor(self) -> TileCursor:
        return self.navigation.cursor

    @property
    def matrix(self) -> TileMatrix:
        return self.navigation.matrix

    def current_address(self) -> str:
        """Address of the tile under the cursor."""
        if self._address is None:
            cursor = self.navigation.cursor
            self._address = self.template.resolve(cursor.matrix_id, cursor.column, cursor.row)
        return self._address

    def apply(self, command: NavigationCommand) -> TileCursor:
        """
        Apply a navigation command.

        Raises:
            NavigationError: If the move is not possible; the cursor is unchanged
        """
        cursor = self.navigation.apply(command)
        self.version += 1
        self._address = None
        return cursor

    def ticket(self) -> TileTicket:
        """Tag the current address with the cursor version that produced it."""
        return TileTicket(
            address=self.current_address(),
            cursor=self.navigation.cursor,
            version=self.version,
        )

    def is_current(self, ticket: TileTicket) -> bool:
        return ticket.version == self.version

    def deliver(self, ticket: TileTicket, image: TileImage) -> bool:
        """
        Accept a decoded tile if it still matches the cursor.

        Returns:
            True if the tile became the current image, False if it was stale
        """
        if not self.is_current(ticket):
            logger.info(
                "Discarding stale tile %s (version %d, current %d)",
                ticket.address, ticket.version, self.version
            )
            return False
        self.image = image
        return True

    def load(self, fetcher: TileFetcher, decoder: TileDecoder) -> Optional[TileImage]:
        """
        Fetch and decode the tile under the cursor.

        Returns:
            The decoded tile, or None if the cursor moved while it was loading

        Raises:
            FetchError: If the fetcher fails
            DecodeError: If the decoder fails
        """
        ticket = self.ticket()
        data = fetcher(ticket.address)
        image = decoder(data)
        if self.deliver(ticket, image):
            return image
        return None
