"""
Open, save and discover card database files
"""

import logging
import os
import pathlib
from typing import Any, BinaryIO, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import ijson
import orjson
import pydantic

from .. import constants
from ..classes.card_fields import Card, is_group_kind
from ..classes.scrydex_meta import ScrydexMetaObject
from ..errors import (
    CardDBSaveError,
    InvalidPathError,
    MetadataMissingError,
    MetadataValidationError,
    NotFoundError,
    ScrydexError,
)
from ..scrydex_config import ScrydexConfig
from ..utils import to_iso_timestamp
from .card_stream import CardStream

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

GENERATED_META_KEYS = ("cliVersion", "schemaVersion", "generatedAt")


def is_valid_type(db_type: Any) -> bool:
    """
    Is the value one of inventory, sorted or sorted_format
    """
    return isinstance(db_type, str) and db_type in constants.DB_TYPES


def load(filepath: PathLike) -> CardStream:
    """
    Open a card database file. Only the metadata is read here, cards are
    read when the returned stream is iterated.
    :param filepath: Card database file
    :return: CardStream
    """
    path = pathlib.Path(filepath)

    if path.is_dir():
        raise InvalidPathError(f"'{path}' is a directory.")
    if not path.exists():
        raise NotFoundError(f"'{path}' does not exist.")
    if not path.is_file():
        raise InvalidPathError(f"'{path}' is not a regular file.")

    meta = _load_meta(path)
    if not meta:
        raise MetadataMissingError(str(path))

    return CardStream(path, _validate_meta(path, meta))


def load_all(
    dirpath: PathLike,
    db_type: Optional[Union[str, Iterable[str]]] = None,
    game_format: Optional[Union[str, Iterable[str]]] = None,
    walk: bool = False,
) -> List[CardStream]:
    """
    Open every card database found in a directory. Files that fail to
    open or validate are skipped.
    :param dirpath: Directory to scan
    :param db_type: Only keep databases of this type / these types
    :param game_format: Only keep sorted_format databases of this format / these formats
    :param walk: Descend into sub-directories
    :return: Card streams in discovery order
    """
    path = pathlib.Path(dirpath)
    if not path.is_dir():
        raise InvalidPathError(f"'{path}' is not a directory.")

    type_set = _as_set(db_type, "db_type")
    if type_set is not None:
        invalid = [entry for entry in type_set if not is_valid_type(entry)]
        if invalid:
            raise ValueError(f"Invalid card database type(s): {', '.join(sorted(invalid))}")

    format_set = _as_set(game_format, "game_format")

    db_files = sorted(path.rglob("*.json") if walk else path.glob("*.json"))

    results: List[CardStream] = []
    for db_file in db_files:
        if not db_file.is_file():
            continue

        try:
            card_stream = load(db_file)
        except (ScrydexError, OSError) as error:
            LOGGER.warning(f"Skipping {db_file}: {error}")
            continue

        if type_set is not None and card_stream.meta.type not in type_set:
            continue

        if format_set is not None:
            if card_stream.meta.type != "sorted_format":
                continue
            if card_stream.meta.format not in format_set:
                continue

        results.append(card_stream)

    LOGGER.debug(f"Loaded {len(results)} / {len(db_files)} card databases from {path}")
    return results


def save(
    filepath: PathLike,
    cards: Sequence[Card],
    meta: Union[Mapping[str, Any], ScrydexMetaObject],
) -> ScrydexMetaObject:
    """
    Write a card database. The metadata is stamped with the Scrydex
    version, schema version and the run's generation time; `name`
    defaults to the file name without extension.
    Cards are serialized one at a time, the full document is never held in memory.
    The target is only replaced once the whole document has been written.
    :param filepath: Target .json file
    :param cards: Cards to write, in order
    :param meta: Caller metadata: type, optional name, format and groups
    :return: Metadata as written
    """
    path = pathlib.Path(filepath)

    if path.suffix != constants.DB_FILE_EXTENSION:
        raise InvalidPathError(
            f"'{path}' does not have the '{constants.DB_FILE_EXTENSION}' file extension."
        )
    if path.is_dir():
        raise InvalidPathError(f"'{path}' is a directory.")

    if not isinstance(cards, (list, tuple)):
        raise CardDBSaveError("'cards' is not a list.")

    metadata = build_meta(path, meta)

    # Written beside the target and moved into place once complete
    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        with tmp_path.open("wb") as file:
            _write_document(file, metadata, cards)
        os.replace(tmp_path, path)
    except orjson.JSONEncodeError as error:
        tmp_path.unlink(missing_ok=True)
        raise CardDBSaveError(f"Card could not be serialized: {error}") from error
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    LOGGER.debug(f"Wrote {len(cards)} cards to {path}")
    return metadata


def build_meta(
    filepath: pathlib.Path, meta: Union[Mapping[str, Any], ScrydexMetaObject]
) -> ScrydexMetaObject:
    """
    Validate caller metadata and stamp the generated fields
    :param filepath: Target file, used for the default name
    :param meta: Caller metadata
    :return: Complete metadata
    """
    if isinstance(meta, ScrydexMetaObject):
        meta = meta.to_json()
    if not isinstance(meta, Mapping):
        raise CardDBSaveError("'meta' is not a mapping.")

    if not is_valid_type(meta.get("type")):
        raise CardDBSaveError("'type' must be 'inventory', 'sorted', or 'sorted_format'.")

    if meta["type"] == "sorted_format" and meta.get("format") not in constants.SUPPORTED_FORMATS:
        raise CardDBSaveError(
            "A sorted format must include a supported game format in 'format'."
        )

    groups = meta.get("groups")
    if isinstance(groups, Mapping):
        for kind in groups:
            if not is_group_kind(kind):
                raise CardDBSaveError(f"Invalid group kind in 'groups': {kind}")

    fields: Dict[str, Any] = {
        key: value for key, value in meta.items() if key not in GENERATED_META_KEYS
    }
    if not isinstance(fields.get("name"), str):
        fields["name"] = filepath.stem

    fields["cliVersion"] = ScrydexConfig().scrydex_version
    fields["schemaVersion"] = ScrydexConfig().schema_version
    fields["generatedAt"] = to_iso_timestamp(constants.EXEC_TIME)

    try:
        return ScrydexMetaObject.model_validate(fields)
    except pydantic.ValidationError as error:
        raise CardDBSaveError(f"Invalid meta data: {error}") from error


def _write_document(
    file: BinaryIO, metadata: ScrydexMetaObject, cards: Iterable[Card]
) -> None:
    file.write(b'{\n  "meta": ')
    file.write(orjson.dumps(metadata.to_json()))
    file.write(b',\n  "cards": [')

    wrote_any = False
    for card in cards:
        file.write(b",\n    " if wrote_any else b"\n    ")
        file.write(orjson.dumps(card))
        wrote_any = True

    file.write(b"\n  ]\n}\n" if wrote_any else b"]\n}\n")


def _load_meta(filepath: pathlib.Path) -> Optional[Dict[str, Any]]:
    """
    Read only the `meta` object; parsing stops once it is complete
    """
    try:
        with filepath.open("rb") as file:
            for meta in ijson.items(file, "meta", use_float=True):
                if not isinstance(meta, dict):
                    raise MetadataValidationError(str(filepath), "'meta' is not an object.")
                return meta
    except (ijson.JSONError, UnicodeDecodeError) as error:
        raise MetadataValidationError(
            str(filepath), "file is not valid JSON", str(error)
        ) from error

    return None


def _validate_meta(filepath: pathlib.Path, meta: Dict[str, Any]) -> ScrydexMetaObject:
    if not isinstance(meta.get("name"), str):
        meta = {**meta, "name": filepath.stem}

    try:
        return ScrydexMetaObject.model_validate(meta)
    except pydantic.ValidationError as error:
        raise MetadataValidationError(
            str(filepath), f"{error.error_count()} invalid field(s)", str(error)
        ) from error


def _as_set(value: Optional[Union[str, Iterable[str]]], name: str) -> Optional[set]:
    if value is None:
        return None
    if isinstance(value, str):
        return {value}
    try:
        return set(value)
    except TypeError as error:
        raise ValueError(f"'{name}' is not a string or list of strings.") from error
