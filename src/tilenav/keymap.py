"""Key bindings for navigation commands."""

from typing import Dict, Optional

from .types import Direction, NavigationCommand, Pan, Quadrant, ZoomIn, ZoomOut

# The zoom keys form a 2x2 block on QWERTY (q w / a s); r is s on Colemak.
KEY_BINDINGS: Dict[str, NavigationCommand] = {
    "w": ZoomIn(quadrant=Quadrant.NE),
    "q": ZoomIn(quadrant=Quadrant.NW),
    "a": ZoomIn(quadrant=Quadrant.SW),
    "s": ZoomIn(quadrant=Quadrant.SE),
    "r": ZoomIn(quadrant=Quadrant.SE),
    "up": Pan(direction=Direction.UP),
    "down": Pan(direction=Direction.DOWN),
    "left": Pan(direction=Direction.LEFT),
    "right": Pan(direction=Direction.RIGHT),
    "space": ZoomOut(),
    " ": ZoomOut(),
    "minus": ZoomOut(),
    "-": ZoomOut(),
}


def command_for_key(key: str) -> Optional[NavigationCommand]:
    """Return the command bound to a key name, or None if the key is unbound."""
    if key == " ":
        return KEY_BINDINGS[key]
    return KEY_BINDINGS.get(key.strip().lower())


def quadrant_for_key(key: str) -> Optional[Quadrant]:
    """Quadrant highlighted while a zoom key is held down."""
    command = command_for_key(key)
    if isinstance(command, ZoomIn):
        return command.quadrant
    return None
