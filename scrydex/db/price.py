"""
Price constraint parsing and evaluation for the card filter
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Literal, Optional

PRICE_REGEX = re.compile(r"^(?P<operator><=|>=|<|>)\s*(?P<value>-?\d+(?:\.\d+)?)$")


@dataclass(frozen=True)
class PriceExpression:
    """Comparison such as `>= 10`."""

    operator: Literal["<", "<=", ">", ">="]
    raw_value: str
    value: float

    def __str__(self) -> str:
        return f"{self.operator}{self.raw_value}"


@dataclass(frozen=True)
class PriceFilter:
    """Either matches cards without a price (`null`) or compares the price."""

    kind: Literal["null", "comparison"]
    expr: Optional[PriceExpression] = None


def to_price(value: Any) -> Optional[float]:
    """
    Normalize a card price that may be stored as a string or number
    :param value: Raw price
    :return: Finite float or None
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    return float(value)


def parse_price_expression(text: Any) -> Optional[PriceExpression]:
    """
    Parse `<`, `<=`, `>` or `>=` followed by a number
    :param text: Raw expression
    :return: Parsed expression or None when invalid
    """
    if not isinstance(text, str):
        return None

    match = PRICE_REGEX.match(text.strip())
    if not match:
        return None

    raw_value = match.group("value")
    value = float(raw_value)
    if not math.isfinite(value):
        return None

    return PriceExpression(match.group("operator"), raw_value, value)  # type: ignore[arg-type]


def parse_price_filter(text: Any) -> Optional[PriceFilter]:
    """
    Parse a price filter option: `null` or a comparison expression
    :param text: Raw option value
    :return: Parsed filter or None when invalid
    """
    if text == "null":
        return PriceFilter("null")

    expr = parse_price_expression(text)
    if expr is None:
        return None

    return PriceFilter("comparison", expr)


def matches_price_expression(price: Any, expr: PriceExpression) -> bool:
    """
    Compare a price against an expression. Zero and missing prices never match.
    """
    price_num = to_price(price)
    if not price_num:
        return False

    if expr.operator == "<":
        return price_num < expr.value
    if expr.operator == "<=":
        return price_num <= expr.value
    if expr.operator == ">":
        return price_num > expr.value
    if expr.operator == ">=":
        return price_num >= expr.value
    return False


def matches_price_filter(price: Any, price_filter: PriceFilter) -> bool:
    """
    Evaluate a price filter against a card price
    :param price: Raw card price
    :param price_filter: Parsed filter
    :return: Does the price satisfy the filter
    """
    if price_filter.kind == "null":
        return to_price(price) is None

    if price_filter.expr is None or to_price(price) is None:
        return False

    return matches_price_expression(price, price_filter.expr)
