"""
Content - The default game catalog and new-game setup.
"""

from .catalog import create_default_catalog
from .setup import setup_game, create_starter_bot

__all__ = [
    "create_default_catalog",
    "setup_game",
    "create_starter_bot",
]
