"""Pytest configuration and fixtures for Scrydex tests."""

import itertools
import json
import pathlib
from typing import Any, Callable, Dict, List

import pytest

_SCRYFALL_IDS = itertools.count(1)


def make_card(**overrides: Any) -> Dict[str, Any]:
    """Build a minimal card entry; keyword arguments replace defaults."""
    card: Dict[str, Any] = {
        "object": "card",
        "scryfall_id": f"00000000-0000-0000-0000-{next(_SCRYFALL_IDS):012d}",
        "name": "Grizzly Bears",
        "lang": "en",
        "foil": None,
        "quantity": 1,
        "filename": "collection.csv",
        "border_color": "black",
        "cmc": 2.0,
        "mana_cost": "{1}{G}",
        "color_identity": ["G"],
        "colors": ["G"],
        "keywords": [],
        "type_line": "Creature — Bear",
        "oracle_text": "",
        "legalities": {"modern": "legal", "legacy": "legal", "standard": "not_legal"},
        "price": "0.25",
    }
    card.update(overrides)
    return card


@pytest.fixture
def card_factory() -> Callable[..., Dict[str, Any]]:
    """Expose make_card to tests."""
    return make_card


@pytest.fixture
def write_raw_db(tmp_path: pathlib.Path) -> Callable[..., pathlib.Path]:
    """
    Write a card database document by hand, bypassing the store writer.
    Useful for malformed or legacy content.
    """

    def _write(name: str, document: Any, raw: bool = False) -> pathlib.Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if raw:
            path.write_text(document, encoding="utf-8")
        else:
            path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_cards() -> List[Dict[str, Any]]:
    """A small mixed collection, one entry per group plus a double faced card."""
    return [
        make_card(
            scryfall_id="aaaaaaaa-0000-0000-0000-000000000001",
            name="Serra Angel",
            cmc=5.0,
            mana_cost="{3}{W}{W}",
            color_identity=["W"],
            keywords=["Flying", "Vigilance"],
            type_line="Creature — Angel",
            quantity=2,
        ),
        make_card(
            scryfall_id="aaaaaaaa-0000-0000-0000-000000000002",
            name="Lightning Bolt",
            cmc=1.0,
            mana_cost="{R}",
            color_identity=["R"],
            type_line="Instant",
            oracle_text="Lightning Bolt deals 3 damage to any target.",
            filename="deck_burn.csv",
        ),
        make_card(
            scryfall_id="aaaaaaaa-0000-0000-0000-000000000003",
            name="Delver of Secrets // Insectile Aberration",
            cmc=1.0,
            mana_cost=None,
            color_identity=["U"],
            type_line="Creature — Human Wizard // Creature — Human Insect",
            card_faces=[
                {
                    "name": "Delver of Secrets",
                    "printed_name": "Tüftler der Geheimnisse",
                    "mana_cost": "{U}",
                    "type_line": "Creature — Human Wizard",
                    "oracle_text": "At the beginning of your upkeep, look at the top card of your library.",
                },
                {
                    "name": "Insectile Aberration",
                    "mana_cost": "",
                    "type_line": "Creature — Human Insect",
                    "oracle_text": "Flying",
                },
            ],
            filename="proxies.csv",
        ),
    ]
