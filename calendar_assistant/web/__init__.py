"""HTTP surface."""

from .server import SlackEventServer

__all__ = ["SlackEventServer"]
