"""
OGC (Open Geospatial Consortium) specific implementations.

This module contains the WMTS capabilities parser and client.
"""

from .wmts import WMTSClient, WMTSParser, load_capabilities, parse_tile_matrix

__all__ = [
    "WMTSClient",
    "WMTSParser",
    "load_capabilities",
    "parse_tile_matrix",
]
