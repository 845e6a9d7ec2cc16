"""
Scrydex Constants that cannot be changed and are hardcoded intentionally
"""

import datetime
import pathlib
from typing import FrozenSet, Tuple

TOP_LEVEL_DIR: pathlib.Path = pathlib.Path(__file__).resolve().parent.parent
RESOURCE_PATH: pathlib.Path = TOP_LEVEL_DIR.joinpath("scrydex").joinpath("resources")
CONFIG_PATH: pathlib.Path = RESOURCE_PATH.joinpath("scrydex.properties")

# Shared by every file written during one run
EXEC_TIME: datetime.datetime = datetime.datetime.now(datetime.timezone.utc)

DB_FILE_EXTENSION: str = ".json"

CARD_OBJECT_KIND: str = "card"

DB_TYPES: Tuple[str, ...] = ("inventory", "sorted", "sorted_format")
GROUP_KINDS: Tuple[str, ...] = ("decks", "external", "proxy")

SUPPORTED_FORMATS: FrozenSet[str] = frozenset(
    {
        "standard",
        "future",
        "historic",
        "timeless",
        "gladiator",
        "pioneer",
        "modern",
        "legacy",
        "pauper",
        "vintage",
        "penny",
        "commander",
        "oathbreaker",
        "standardbrawl",
        "brawl",
        "alchemy",
        "paupercommander",
        "duel",
        "oldschool",
        "premodern",
        "predh",
    }
)
VALID_LEGALITY: FrozenSet[str] = frozenset({"legal", "restricted"})
SUPPORTED_BORDERS: FrozenSet[str] = frozenset(
    {"black", "borderless", "gold", "silver", "white", "yellow"}
)
WUBRG: Tuple[str, ...] = ("W", "U", "B", "R", "G")

REGEX_FIELDS: Tuple[str, ...] = ("name", "oracle_text", "type_line")
