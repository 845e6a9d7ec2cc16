"""
Card field accessors shared by filtering, diffing and exporting.

Multi-faced cards carry their per-face values in `card_faces`; the
`parts_*` helpers return the face values and fall back to the card level
value when no face defines the field.
"""

import math
from typing import Any, Dict, List

from .. import constants

Card = Dict[str, Any]


def is_number(value: Any) -> bool:
    """
    Is the value a finite int or float (bool excluded)
    """
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def is_group_kind(value: Any) -> bool:
    """
    Type guard for group kinds
    :param value: Anything
    :return: Is the value one of decks, external or proxy
    """
    return isinstance(value, str) and value in constants.GROUP_KINDS


def unique_card_key(card: Card) -> str:
    """
    Identity of a physical card: Scryfall ID, finish and language
    :param card: Card to build a key for
    :return: Composite identity key
    """
    foil = "normal" if card.get("foil") is None else card["foil"]
    return f"{card.get('scryfall_id')}:{foil}:{card.get('lang')}"


def _parts(card: Card, prop: str, accept: Any) -> List[Any]:
    results: List[Any] = []

    faces = card.get("card_faces")
    if isinstance(faces, list) and faces:
        for face in faces:
            if isinstance(face, dict) and accept(face.get(prop)):
                results.append(face[prop])

        if results:
            return results

    if accept(card.get(prop)):
        results.append(card[prop])

    return results


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


def parts_cmc(card: Card) -> List[float]:
    """Mana values of each face."""
    return _parts(card, "cmc", is_number)


def parts_mana_cost(card: Card) -> List[str]:
    """Mana cost of each face."""
    return _parts(card, "mana_cost", _is_str)


def parts_name(card: Card) -> List[str]:
    """Oracle name of each face."""
    return _parts(card, "name", _is_str)


def parts_printed_name(card: Card) -> List[str]:
    """Localized / printed name of each face."""
    return _parts(card, "printed_name", _is_str)


def parts_oracle_text(card: Card) -> List[str]:
    """Oracle text of each face."""
    return _parts(card, "oracle_text", _is_str)


def parts_type_line(card: Card) -> List[str]:
    """Type line of each face."""
    return _parts(card, "type_line", _is_str)


def is_multi_faced(card: Card) -> bool:
    """Does the card carry a non-empty card_faces list"""
    faces = card.get("card_faces")
    return isinstance(faces, list) and len(faces) > 0
