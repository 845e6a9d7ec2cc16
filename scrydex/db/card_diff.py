"""
Identity keyed quantity reconciliation between two card databases
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, FrozenSet, Optional

from ..classes.card_fields import Card, unique_card_key

if TYPE_CHECKING:
    from .card_stream import CardStream, CardStreamOptions

LOGGER = logging.getLogger(__name__)

InvalidQuantityHandler = Callable[[Card, Any], None]


@dataclass(frozen=True)
class CardStreamDiff:
    """
    Result of a diff. `changed` holds comparison minus baseline quantity,
    zero deltas are never stored.
    """

    added: FrozenSet[str] = frozenset()
    removed: FrozenSet[str] = frozenset()
    changed: Dict[str, int] = field(default_factory=dict)

    def is_empty(self) -> bool:
        """Both sides hold the same cards in the same quantities"""
        return not (self.added or self.removed or self.changed)


def to_quantity(value: Any) -> Optional[int]:
    """
    Validate a card quantity
    :param value: Raw quantity
    :return: Positive integer quantity or None
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and value > 0:
        return value
    return None


def build_quantity_map(
    stream: "CardStream",
    options: Optional["CardStreamOptions"] = None,
    on_invalid: Optional[InvalidQuantityHandler] = None,
) -> Dict[str, int]:
    """
    Sum quantities per identity key over a stream
    :param stream: Card stream to read
    :param options: Stream options, defaults to exportable cards only
    :param on_invalid: Called for every card with an unusable quantity
    :return: Identity key => quantity
    """
    from .card_stream import CardStreamOptions

    if options is None:
        options = CardStreamOptions(is_exportable=True)

    quantities: Dict[str, int] = {}

    for card in stream.stream(options):
        quantity = to_quantity(card.get("quantity"))
        key = unique_card_key(card)

        if quantity is None:
            LOGGER.warning(
                f"Skipping {key} in {stream.filepath}: invalid quantity {card.get('quantity')!r}"
            )
            if on_invalid is not None:
                on_invalid(card, card.get("quantity"))
            continue

        quantities[key] = quantities.get(key, 0) + quantity

    return quantities


def diff(
    baseline: "CardStream",
    comparison: "CardStream",
    options: Optional["CardStreamOptions"] = None,
    on_invalid: Optional[InvalidQuantityHandler] = None,
) -> CardStreamDiff:
    """
    Compare two card databases by identity key and quantity.
    Card details for the returned keys need a second pass over the streams.
    :param baseline: Older snapshot
    :param comparison: Newer snapshot
    :param options: Stream options applied to both sides, defaults to exportable cards
    :param on_invalid: Called for every card with an unusable quantity
    :return: Added, removed and changed identity keys
    """
    baseline_map = build_quantity_map(baseline, options, on_invalid)
    comparison_map = build_quantity_map(comparison, options, on_invalid)

    baseline_keys = baseline_map.keys()
    comparison_keys = comparison_map.keys()

    changed: Dict[str, int] = {}
    for key in sorted(baseline_keys & comparison_keys):
        delta = comparison_map[key] - baseline_map[key]
        if delta != 0:
            changed[key] = delta

    LOGGER.debug(
        f"Diff {baseline.filepath} => {comparison.filepath}: "
        f"{len(comparison_keys - baseline_keys)} added, "
        f"{len(baseline_keys - comparison_keys)} removed, {len(changed)} changed"
    )

    return CardStreamDiff(
        added=frozenset(comparison_keys - baseline_keys),
        removed=frozenset(baseline_keys - comparison_keys),
        changed=changed,
    )
