import json
import pathlib

import pytest

from scrydex import constants
from scrydex.classes import ScrydexMetaObject
from scrydex.db import load, load_all, save
from scrydex.errors import (
    CardDBSaveError,
    InvalidPathError,
    MetadataMissingError,
    MetadataValidationError,
    NotFoundError,
    ScrydexError,
)
from scrydex.scrydex_config import ScrydexConfig
from scrydex.utils import to_iso_timestamp

# ============================================================================
# save / load round trip
# ============================================================================


def test_round_trip(tmp_path, sample_cards):
    path = tmp_path / "inventory.json"

    written = save(
        path,
        sample_cards,
        {"type": "inventory", "name": "My Cards", "groups": {"decks": ["deck_burn.csv"]}},
    )
    card_stream = load(path)

    assert card_stream.read_all() == sample_cards
    assert list(card_stream.stream()) == sample_cards
    assert card_stream.meta == written
    assert card_stream.meta.name == "My Cards"
    assert card_stream.meta.groups.decks == frozenset({"deck_burn.csv"})
    assert card_stream.meta.groups.proxy is None


def test_save_stamps_generated_fields(tmp_path, monkeypatch):
    monkeypatch.setattr(ScrydexConfig(), "scrydex_version", "9.9.9")
    monkeypatch.setattr(ScrydexConfig(), "schema_version", "1.2.3")

    first = save(tmp_path / "a.json", [], {"type": "sorted", "generatedAt": "bogus"})
    second = save(tmp_path / "b.json", [], {"type": "sorted"})

    assert first.cli_version == "9.9.9"
    assert first.schema_version == "1.2.3"
    assert first.generated_at == to_iso_timestamp(constants.EXEC_TIME)
    assert first.generated_at == second.generated_at


def test_save_default_name(tmp_path):
    meta = save(tmp_path / "Modern Staples.json", [], {"type": "sorted"})

    assert meta.name == "Modern Staples"
    assert load(tmp_path / "Modern Staples.json").meta.name == "Modern Staples"


def test_saved_document_layout(tmp_path, card_factory):
    path = tmp_path / "layout.json"
    save(path, [card_factory(), card_factory()], {"type": "inventory"})

    text = path.read_text(encoding="utf-8")
    document = json.loads(text)

    assert text.startswith('{\n  "meta": {')
    assert list(document.keys()) == ["meta", "cards"]
    assert len(document["cards"]) == 2
    assert document["meta"]["type"] == "inventory"
    assert "format" not in document["meta"]


def test_save_empty_cards(tmp_path):
    path = tmp_path / "empty.json"
    save(path, [], {"type": "inventory"})

    assert json.loads(path.read_text(encoding="utf-8"))["cards"] == []
    assert load(path).read_all() == []


def test_save_accepts_existing_meta(tmp_path, sample_cards):
    source = tmp_path / "source.json"
    original = save(
        source,
        sample_cards,
        {"type": "sorted_format", "format": "modern", "groups": {"proxy": ["proxies.csv"]}},
    )

    copy_meta = save(tmp_path / "copy.json", sample_cards[:1], load(source).meta)

    assert isinstance(copy_meta, ScrydexMetaObject)
    assert copy_meta.format == "modern"
    assert copy_meta.groups == original.groups


# ============================================================================
# save validation
# ============================================================================


@pytest.mark.parametrize(
    "meta",
    [
        {},
        {"type": "collection"},
        {"type": None},
        {"type": "sorted_format"},
        {"type": "sorted_format", "format": "not_a_format"},
        {"type": "inventory", "groups": {"sideboard": ["x.csv"]}},
    ],
)
def test_save_rejects_invalid_meta(tmp_path, meta):
    path = tmp_path / "bad.json"

    with pytest.raises(CardDBSaveError):
        save(path, [], meta)

    assert not path.exists()


def test_save_rejects_bad_extension(tmp_path):
    with pytest.raises(InvalidPathError):
        save(tmp_path / "cards.txt", [], {"type": "inventory"})


def test_save_rejects_directory_target(tmp_path):
    target = tmp_path / "dir.json"
    target.mkdir()

    with pytest.raises(InvalidPathError):
        save(target, [], {"type": "inventory"})


def test_save_rejects_non_list_cards(tmp_path, card_factory):
    with pytest.raises(CardDBSaveError):
        save(tmp_path / "cards.json", (card for card in [card_factory()]), {"type": "inventory"})


def test_save_failure_leaves_no_file(tmp_path, card_factory):
    path = tmp_path / "inventory.json"

    with pytest.raises(CardDBSaveError):
        save(path, [card_factory(), card_factory(tags={1, 2})], {"type": "inventory"})

    assert list(tmp_path.iterdir()) == []


def test_save_failure_keeps_previous_file(tmp_path, card_factory):
    path = tmp_path / "inventory.json"
    save(path, [card_factory(name="Forest")], {"type": "inventory"})

    with pytest.raises(CardDBSaveError):
        save(path, [card_factory(tags={1, 2})], {"type": "inventory"})

    assert [card["name"] for card in load(path).stream()] == ["Forest"]
    assert list(tmp_path.iterdir()) == [path]


# ============================================================================
# load validation
# ============================================================================


def test_load_missing_file(tmp_path):
    with pytest.raises(NotFoundError):
        load(tmp_path / "missing.json")


def test_load_directory(tmp_path):
    with pytest.raises(InvalidPathError):
        load(tmp_path)


def test_load_without_meta(write_raw_db, card_factory):
    path = write_raw_db("no_meta.json", {"cards": [card_factory()]})

    with pytest.raises(MetadataMissingError):
        load(path)


def test_load_empty_meta(write_raw_db):
    path = write_raw_db("empty_meta.json", {"meta": {}, "cards": []})

    with pytest.raises(MetadataMissingError):
        load(path)


@pytest.mark.parametrize(
    "meta",
    [
        {"type": "collection"},
        {"type": "sorted_format", "cliVersion": "0", "schemaVersion": "0", "generatedAt": "x"},
        {"type": "inventory"},
        "inventory",
    ],
)
def test_load_invalid_meta(write_raw_db, meta):
    path = write_raw_db("invalid_meta.json", {"meta": meta, "cards": []})

    with pytest.raises(MetadataValidationError):
        load(path)


def test_load_corrupt_json(write_raw_db):
    path = write_raw_db("corrupt.json", '{"meta": {"type": "inv', raw=True)

    with pytest.raises(ScrydexError):
        load(path)


def test_meta_is_immutable(tmp_path):
    save(tmp_path / "frozen.json", [], {"type": "inventory", "groups": {"decks": ["a.csv"]}})
    meta = load(tmp_path / "frozen.json").meta

    with pytest.raises(Exception):
        meta.name = "changed"
    with pytest.raises(AttributeError):
        meta.groups.decks.add("b.csv")


# ============================================================================
# load_all
# ============================================================================


@pytest.fixture
def store_dir(tmp_path, card_factory) -> pathlib.Path:
    root = tmp_path / "stores"
    (root / "nested").mkdir(parents=True)

    save(root / "inventory.json", [card_factory()], {"type": "inventory"})
    save(root / "sorted.json", [card_factory()], {"type": "sorted"})
    save(root / "modern.json", [card_factory()], {"type": "sorted_format", "format": "modern"})
    save(
        root / "nested" / "pauper.json",
        [card_factory()],
        {"type": "sorted_format", "format": "pauper"},
    )
    (root / "notes.txt").write_text("not a database", encoding="utf-8")
    return root


def _names(card_streams):
    return [card_stream.meta.name for card_stream in card_streams]


def test_load_all_skips_corrupt_files(tmp_path, card_factory):
    save(tmp_path / "good.json", [card_factory()], {"type": "inventory"})
    (tmp_path / "corrupt.json").write_text("{not json", encoding="utf-8")
    (tmp_path / "other.json").write_text('{"cards": []}', encoding="utf-8")

    assert _names(load_all(tmp_path)) == ["good"]


def test_load_all_empty_directory(tmp_path):
    assert load_all(tmp_path) == []


def test_load_all_discovery(store_dir):
    assert _names(load_all(store_dir)) == ["inventory", "modern", "sorted"]
    assert _names(load_all(store_dir, walk=True)) == ["inventory", "modern", "pauper", "sorted"]


def test_load_all_type_filter(store_dir):
    assert _names(load_all(store_dir, db_type="sorted")) == ["sorted"]
    assert _names(load_all(store_dir, db_type=["sorted", "sorted_format"], walk=True)) == [
        "modern",
        "pauper",
        "sorted",
    ]


def test_load_all_format_filter(store_dir):
    assert _names(load_all(store_dir, game_format="pauper", walk=True)) == ["pauper"]
    assert _names(load_all(store_dir, game_format={"modern", "pauper"}, walk=True)) == [
        "modern",
        "pauper",
    ]
    assert load_all(store_dir, db_type="sorted", game_format="modern") == []


def test_load_all_argument_validation(store_dir):
    with pytest.raises(InvalidPathError):
        load_all(store_dir / "inventory.json")

    with pytest.raises(ValueError):
        load_all(store_dir, db_type="collection")

    with pytest.raises(ValueError):
        load_all(store_dir, game_format=5)
