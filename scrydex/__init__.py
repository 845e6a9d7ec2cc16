"""
Scrydex card database store
MIT License
"""

from .db import CardStream, CardStreamOptions, load, load_all, save
from .errors import CardStreamError, ScrydexError

__all__ = [
    "CardStream",
    "CardStreamError",
    "CardStreamOptions",
    "ScrydexError",
    "load",
    "load_all",
    "save",
]
