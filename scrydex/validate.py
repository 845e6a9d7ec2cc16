"""
Parse raw command line filter options into a CardFilterConfig
"""

import math
import re
from typing import Any, FrozenSet, List, Mapping, Optional, Pattern, Tuple

from . import constants
from .db.card_filter import CardFilterConfig, PropertyFilters, RegexSearch
from .db.price import parse_price_filter
from .errors import FilterConfigError
from .utils import parse_mana_cost_colors


def filter_options(
    opts: Mapping[str, Any], regex_input: Optional[str] = None
) -> CardFilterConfig:
    """
    Build a filter config from command line options
    :param opts: Option name => raw value (argparse dests)
    :param regex_input: Optional regular expression to search with
    :return: Filter config
    :raises FilterConfigError: Any invalid option
    """
    regex = None
    if regex_input is not None:
        regex = _regex_search(opts, regex_input)

    properties = PropertyFilters(
        border=_optional(opts, "border", _parse_border),
        color_identity=_optional(opts, "color_identity", _parse_color_identity),
        cmc=_optional(opts, "cmc", _parse_cmc),
        formats=_optional(opts, "formats", game_formats),
        keywords=_optional(opts, "keywords", _parse_keywords),
        mana_cost=_optional(opts, "mana_cost", _parse_mana_cost),
        price=_optional(opts, "price", _parse_price),
    )

    return CardFilterConfig(properties=properties, regex=regex)


def game_formats(formats: Any) -> Tuple[str, ...]:
    """
    Parse a colon separated list of game formats, such as `modern:pioneer`
    :param formats: Raw option value
    :return: Formats in the order given
    :raises FilterConfigError: Duplicate or unsupported format
    """
    if not isinstance(formats, str):
        raise FilterConfigError("'formats' option is not a string.")

    seen: List[str] = []
    for game_format in formats.split(":"):
        if game_format in seen:
            raise FilterConfigError(f"'formats' option contains duplicate format: {game_format}")
        if game_format not in constants.SUPPORTED_FORMATS:
            raise FilterConfigError(f"'formats' option contains an invalid format: {game_format}")
        seen.append(game_format)

    return tuple(seen)


def _optional(opts: Mapping[str, Any], key: str, parse: Any) -> Any:
    value = opts.get(key)
    return None if value is None else parse(value)


def _regex_search(opts: Mapping[str, Any], regex_input: str) -> Optional[RegexSearch]:
    for flag in ("b", "i", "exact", "name", "oracle", "type"):
        value = opts.get(flag)
        if value is not None and not isinstance(value, bool):
            raise FilterConfigError(f"'{flag}' option is not a boolean.")

    if not regex_input:
        return None

    fields = []
    if opts.get("name") or not (opts.get("oracle") or opts.get("type")):
        fields.append("name")
    if opts.get("oracle"):
        fields.append("oracle_text")
    if opts.get("type"):
        fields.append("type_line")

    try:
        return RegexSearch.compile(
            regex_input,
            fields=fields,
            case_insensitive=bool(opts.get("i")),
            exact=bool(opts.get("exact")),
            word_boundary=bool(opts.get("b")),
        )
    except re.error as error:
        raise FilterConfigError(f"Invalid regular expression: {error}") from error


def _parse_border(borders: Any) -> FrozenSet[str]:
    if not isinstance(borders, str):
        raise FilterConfigError("'border' option is not a string.")

    seen = set()
    for border in borders.split(":"):
        if border in seen:
            raise FilterConfigError(f"'border' option contains duplicate border: {border}")
        if border not in constants.SUPPORTED_BORDERS:
            raise FilterConfigError(f"'border' option contains an invalid border: {border}")
        seen.add(border)

    return frozenset(seen)


def _parse_color_identity(value: Any) -> FrozenSet[str]:
    if not isinstance(value, str):
        raise FilterConfigError("'color-identity' option is not a string.")

    colors = parse_mana_cost_colors(value)
    if not colors:
        raise FilterConfigError(
            f"'color-identity' option contains no valid WUBRG colors: {value}"
        )

    return frozenset(colors)


def _parse_cmc(value: Any) -> float:
    try:
        cmc = float(value)
    except (TypeError, ValueError):
        cmc = math.nan

    if not math.isfinite(cmc) or cmc < 0:
        raise FilterConfigError("'cmc' option must be 0 to a positive number.")

    return cmc


def _parse_keywords(keywords: Any) -> Tuple[Pattern[str], ...]:
    if not isinstance(keywords, str):
        raise FilterConfigError("'keywords' option is not a string.")

    seen = {}
    for keyword in keywords.split(":"):
        if not keyword:
            raise FilterConfigError("'keywords' option contains empty / zero length entry.")
        if keyword in seen:
            raise FilterConfigError(f"'keywords' option contains duplicate keyword: {keyword}")

        try:
            seen[keyword] = re.compile(rf"\b{keyword}\b", re.IGNORECASE)
        except re.error as error:
            raise FilterConfigError(f"'keywords' option has an invalid entry: {keyword}") from error

    return tuple(seen.values())


def _parse_mana_cost(value: Any) -> str:
    if not isinstance(value, str):
        raise FilterConfigError("'mana-cost' option is not a string.")
    return value


def _parse_price(value: Any) -> Any:
    if not isinstance(value, str):
        raise FilterConfigError(
            "'price' option is not a string. Ensure quotes are used IE \">10\""
        )

    price_filter = parse_price_filter(value)
    if price_filter is None:
        raise FilterConfigError("'price' option is an invalid price filter.")

    return price_filter
