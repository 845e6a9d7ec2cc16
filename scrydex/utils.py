"""
Scrydex simple utilities
"""

import datetime
import logging
import os
import re
from typing import Optional, Set

from . import constants

LOGGER = logging.getLogger(__name__)

MANA_SYMBOL_REGEX = re.compile(r"{([^}]+)}")


def init_logger(level: Optional[str] = None) -> None:
    """
    Initialize the main system logger
    :param level: Level name to use, overriding the SCRYDEX_DEBUG environment switch
    """
    if level:
        log_level = logging.getLevelName(level.upper())
    elif os.environ.get("SCRYDEX_DEBUG", "").lower() in ["true", "1"]:
        log_level = logging.DEBUG
    else:
        log_level = logging.INFO

    logging.basicConfig(
        level=log_level,
        format="[%(levelname)s] %(asctime)s: %(message)s",
        handlers=[logging.StreamHandler()],
    )


def is_valid_log_level(level: str) -> bool:
    """
    Check a level name against the names known to the logging module
    :param level: Level name, case insensitive
    :return Is the level usable by init_logger
    """
    return isinstance(logging.getLevelName(level.upper()), int)


def to_iso_timestamp(moment: datetime.datetime) -> str:
    """
    Convert a datetime to UTC ISO-8601 with millisecond precision
    :param moment: Datetime to convert
    :return: Timestamp such as 2025-01-01T12:00:00.000Z
    """
    utc = moment.astimezone(datetime.timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def parse_mana_cost_colors(mana_cost: str) -> Set[str]:
    """
    Pull the WUBRG colors out of a mana cost string.
    Hybrid and phyrexian symbols contribute every color letter they hold,
    bare letters ("WU") are accepted as well as braced symbols ("{W}{U}").
    :param mana_cost: Mana cost string
    :return: Set of color letters
    """
    if not isinstance(mana_cost, str) or not mana_cost:
        return set()

    symbols = MANA_SYMBOL_REGEX.findall(mana_cost)
    if not symbols:
        symbols = list(mana_cost)

    colors: Set[str] = set()
    for symbol in symbols:
        for part in re.split(r"[^A-Z]", symbol.upper()):
            if part in constants.WUBRG:
                colors.add(part)

    return colors
