"""Hex grid providers: the capability interface and its H3 implementation."""

from rasterhex.grid.provider import HexGridProvider
from rasterhex.grid.h3_provider import H3GridProvider

__all__ = ['HexGridProvider', 'H3GridProvider', 'default_provider']


def default_provider() -> H3GridProvider:
    """Provider used when the caller does not pass one."""
    return H3GridProvider()
