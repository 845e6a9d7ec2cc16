"""
Reusable card filter built from independent card properties and an
optional regex search. Used by the `filter` and `find` commands and by
every card stream.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Pattern, Tuple

from .. import constants
from ..classes.card_fields import (
    Card,
    is_multi_faced,
    is_number,
    parts_cmc,
    parts_mana_cost,
    parts_name,
    parts_oracle_text,
    parts_printed_name,
    parts_type_line,
)
from .price import PriceFilter, matches_price_filter


@dataclass(frozen=True)
class RegexSearch:
    """
    Compiled search over a set of card text fields.
    Exact and word boundary anchoring is applied once by `compile`.
    """

    pattern: Pattern[str]
    fields: FrozenSet[str]
    input: str
    case_insensitive: bool = False
    exact: bool = False
    word_boundary: bool = False

    @classmethod
    def compile(
        cls,
        text: str,
        fields: Iterable[str] = ("name",),
        case_insensitive: bool = False,
        exact: bool = False,
        word_boundary: bool = False,
    ) -> "RegexSearch":
        """
        Build a search from raw user input
        :param text: Regular expression source
        :param fields: Any of name, oracle_text, type_line
        :param case_insensitive: Ignore case
        :param exact: Anchor the pattern at both ends
        :param word_boundary: Wrap the pattern in word boundaries
        :return: RegexSearch
        :raises re.error: Invalid pattern
        :raises ValueError: Unknown field
        """
        field_set = frozenset(fields)
        unknown = field_set.difference(constants.REGEX_FIELDS)
        if unknown:
            raise ValueError(f"Unknown regex search fields: {', '.join(sorted(unknown))}")

        source = text
        if word_boundary:
            source = rf"\b(?:{source})\b"
        if exact:
            source = f"^(?:{source})$"

        pattern = re.compile(source, re.IGNORECASE if case_insensitive else 0)

        return cls(
            pattern=pattern,
            fields=field_set,
            input=text,
            case_insensitive=case_insensitive,
            exact=exact,
            word_boundary=word_boundary,
        )

    def test(self, value: str) -> bool:
        """Does the pattern match anywhere in the value"""
        return self.pattern.search(value) is not None


@dataclass(frozen=True)
class PropertyFilters:
    """
    Independent card property constraints; every supplied constraint must pass.
    """

    border: Optional[FrozenSet[str]] = None
    color_identity: Optional[FrozenSet[str]] = None
    cmc: Optional[float] = None
    formats: Optional[Tuple[str, ...]] = None
    keywords: Optional[Tuple[Pattern[str], ...]] = None
    mana_cost: Optional[str] = None
    price: Optional[PriceFilter] = None

    def is_empty(self) -> bool:
        """No constraint supplied"""
        return (
            self.border is None
            and self.color_identity is None
            and self.cmc is None
            and not self.formats
            and not self.keywords
            and self.mana_cost is None
            and self.price is None
        )


@dataclass(frozen=True)
class CardFilterConfig:
    """Declarative filter configuration."""

    properties: PropertyFilters = field(default_factory=PropertyFilters)
    regex: Optional[RegexSearch] = None


def has_filter_checks(config: Optional[CardFilterConfig]) -> bool:
    """
    Checks if there are filter checks to execute in the given config object
    :param config: Filter config or None
    :return: Filter check status
    """
    if config is None:
        return False
    return config.regex is not None or not config.properties.is_empty()


def card_matches(card: Card, config: CardFilterConfig) -> bool:
    """
    Test a card against the given filter config
    :param card: Card to test
    :param config: Filter config
    :return: Does the card pass every configured check
    """
    if config.regex is not None and config.regex.fields:
        if not _test_regex(card, config.regex):
            return False

    return _test_properties(card, config.properties)


def _test_properties(card: Card, properties: PropertyFilters) -> bool:
    if properties.border is not None and card.get("border_color") not in properties.border:
        return False

    color_identity = card.get("color_identity")
    if properties.color_identity is not None and isinstance(color_identity, list):
        if not properties.color_identity.issuperset(color_identity):
            return False

    if properties.cmc is not None:
        if is_multi_faced(card):
            if properties.cmc not in parts_cmc(card):
                return False
        elif not is_number(card.get("cmc")) or card["cmc"] != properties.cmc:
            return False

    if properties.formats:
        legalities = card.get("legalities")
        if not isinstance(legalities, dict):
            return False
        for game_format in properties.formats:
            if legalities.get(game_format) not in constants.VALID_LEGALITY:
                return False

    if properties.keywords:
        keywords = card.get("keywords")
        if not isinstance(keywords, list) or not keywords:
            return False
        for keyword_regex in properties.keywords:
            if not any(
                isinstance(keyword, str) and keyword_regex.search(keyword)
                for keyword in keywords
            ):
                return False

    if properties.mana_cost is not None:
        if is_multi_faced(card):
            if properties.mana_cost not in parts_mana_cost(card):
                return False
        elif card.get("mana_cost") != properties.mana_cost:
            return False

    if properties.price is not None:
        return matches_price_filter(card.get("price"), properties.price)

    return True


def _test_regex(card: Card, regex: RegexSearch) -> bool:
    multi_faced = is_multi_faced(card)

    if "name" in regex.fields:
        if multi_faced:
            for value in parts_printed_name(card) + parts_name(card):
                if regex.test(value):
                    return True

        for key in ("printed_name", "name"):
            value = card.get(key)
            if isinstance(value, str) and regex.test(value):
                return True

    if "oracle_text" in regex.fields:
        if multi_faced and any(regex.test(text) for text in parts_oracle_text(card)):
            return True

        value = card.get("oracle_text")
        if isinstance(value, str) and regex.test(value):
            return True

    if "type_line" in regex.fields:
        if multi_faced and any(regex.test(text) for text in parts_type_line(card)):
            return True

        value = card.get("type_line")
        if isinstance(value, str) and regex.test(value):
            return True

    return False


def log_config(
    config: CardFilterConfig, logger: logging.Logger, level: int = logging.INFO
) -> None:
    """
    Write a human readable description of a filter config
    :param config: Filter config
    :param logger: Logger to write to
    :param level: Logging level
    """
    properties = config.properties

    if config.regex is not None:
        logger.log(level, f'Search Input: "{config.regex.input}"')
        logger.log(level, f"Card Fields: {', '.join(sorted(config.regex.fields))}")

        flags = []
        if config.regex.case_insensitive:
            flags.append("Case Insensitive: True")
        if config.regex.exact:
            flags.append("Exact Match: True")
        if config.regex.word_boundary:
            flags.append("Word Boundary: True")
        if flags:
            logger.log(level, "; ".join(flags))

    if properties.border is not None:
        logger.log(level, f"Card borders: {' or '.join(sorted(properties.border))}")

    if properties.color_identity is not None:
        logger.log(level, f"Color Identity: {', '.join(sorted(properties.color_identity))}")

    if properties.cmc is not None:
        logger.log(level, f"CMC: {properties.cmc:g}")

    if properties.formats:
        logger.log(level, f"Formats: {' and '.join(properties.formats)}")

    if properties.keywords:
        logger.log(
            level,
            f"Keywords: {' and '.join(regex.pattern for regex in properties.keywords)}",
        )

    if properties.mana_cost is not None:
        logger.log(level, f"Mana Cost: {properties.mana_cost}")

    if properties.price is not None:
        if properties.price.kind == "null":
            logger.log(level, "Price: null (card entries without a price)")
        else:
            logger.log(level, f"Price: {properties.price.expr}")
