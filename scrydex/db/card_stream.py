"""
Streaming reader for a single card database file.

Cards are parsed incrementally with ijson so that collections with
hundreds of thousands of entries are never loaded into memory at once.
"""

import logging
import pathlib
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    FrozenSet,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Protocol,
    Set,
)

import ijson
import orjson

from .. import constants
from ..classes.card_fields import Card, is_group_kind, unique_card_key
from ..classes.scrydex_meta import ScrydexMetaObject
from ..errors import CardStreamError
from .card_filter import CardFilterConfig, card_matches, has_filter_checks

if TYPE_CHECKING:
    from .card_diff import CardStreamDiff, InvalidQuantityHandler

LOGGER = logging.getLogger(__name__)

SkipHandler = Callable[[Any, str], None]


class MembershipTest(Protocol):
    """Anything answering `key in lookup`, such as a set or a dict."""

    def __contains__(self, key: object) -> bool:
        ...


@dataclass(frozen=True)
class CardStreamOptions:
    """
    Options applied while streaming cards; all are independent.

    groups maps a group kind to False to drop the cards of that group.
    is_exportable drops the cards of every group.
    unique_keys only lets through cards whose identity key it contains.
    unique_once lets through the first card seen for each identity key.
    filter_fn runs after every other check.
    on_skip is called with each malformed entry and the reason it was dropped.
    """

    filter: Optional[CardFilterConfig] = None
    filter_fn: Optional[Callable[[Card], bool]] = None
    groups: Optional[Mapping[str, bool]] = None
    is_exportable: bool = False
    unique_keys: Optional[MembershipTest] = None
    unique_once: bool = False
    on_skip: Optional[SkipHandler] = None

    def __post_init__(self) -> None:
        for kind in self.groups or {}:
            if not is_group_kind(kind):
                raise ValueError(f"Invalid group kind: {kind}")

    def excluded_groups(self) -> FrozenSet[str]:
        """
        Group kinds whose cards are dropped from the stream
        """
        if self.is_exportable:
            return frozenset(constants.GROUP_KINDS)

        return frozenset(
            kind for kind, include in (self.groups or {}).items() if include is False
        )


class CardStream:
    """
    Read access to one card database file: its metadata and a lazy,
    single pass sequence of its cards.
    """

    def __init__(self, filepath: pathlib.Path, meta: ScrydexMetaObject):
        self.__filepath = pathlib.Path(filepath)
        self.__meta = meta
        self.__groups: Dict[str, FrozenSet[str]] = (
            dict(meta.groups.items()) if meta.groups else {}
        )

    def __repr__(self) -> str:
        return f"CardStream({str(self.__filepath)!r}, type={self.__meta.type!r})"

    @property
    def filepath(self) -> pathlib.Path:
        """Path of the backing file"""
        return self.__filepath

    @property
    def meta(self) -> ScrydexMetaObject:
        """Immutable metadata envelope"""
        return self.__meta

    def stream(self, options: Optional[CardStreamOptions] = None) -> Iterator[Card]:
        """
        Lazily read cards from disk in document order.
        The file stays open only while the iterator is alive; closing the
        generator early releases it.
        :param options: Stream options
        :return: Iterator of cards passing every configured check
        :raises CardStreamError: The cards array is truncated or not valid JSON
        """
        with self.__filepath.open("rb") as file:
            try:
                yield from self.__select(
                    ijson.items(file, "cards.item", use_float=True),
                    options or CardStreamOptions(),
                )
            except (ijson.JSONError, UnicodeDecodeError) as error:
                raise CardStreamError(str(self.__filepath), str(error)) from error

    def read_all(self, options: Optional[CardStreamOptions] = None) -> List[Card]:
        """
        Load the whole document at once. Convenient for small files; use
        `stream` for large collections.
        :param options: Stream options
        :return: List of cards passing every configured check
        :raises CardStreamError: The file is not valid JSON
        """
        try:
            document = orjson.loads(self.__filepath.read_bytes())
        except orjson.JSONDecodeError as error:
            raise CardStreamError(str(self.__filepath), str(error)) from error

        cards = document.get("cards") if isinstance(document, dict) else None
        if not isinstance(cards, list):
            return []

        return list(self.__select(cards, options or CardStreamOptions()))

    def get_quantity_map(
        self,
        options: Optional[CardStreamOptions] = None,
        on_invalid: Optional["InvalidQuantityHandler"] = None,
    ) -> Dict[str, int]:
        """
        Total quantity per identity key; by default only exportable cards count
        :param options: Stream options, defaults to exportable cards only
        :param on_invalid: Called for every card with an unusable quantity
        :return: Identity key => quantity
        """
        from .card_diff import build_quantity_map

        return build_quantity_map(self, options, on_invalid)

    def diff(
        self,
        comparison: "CardStream",
        options: Optional[CardStreamOptions] = None,
        on_invalid: Optional["InvalidQuantityHandler"] = None,
    ) -> "CardStreamDiff":
        """
        Reconcile this stream (the baseline) against another
        :param comparison: Newer snapshot
        :param options: Stream options applied to both sides
        :param on_invalid: Called for every card with an unusable quantity
        :return: Added, removed and changed identity keys
        """
        from .card_diff import diff

        return diff(self, comparison, options, on_invalid)

    def is_card_exportable(self, card: Card) -> bool:
        """
        A card is exportable when its source file belongs to no group
        """
        filename = card.get("filename")
        return not any(filename in members for members in self.__groups.values())

    def is_card_group(self, card: Card, kind: str) -> bool:
        """
        Does the card's source file belong to the given group
        :param card: Card to check
        :param kind: decks, external or proxy
        :return: Group membership
        """
        if not is_group_kind(kind):
            raise ValueError(f"Invalid group kind: {kind}")

        return card.get("filename") in self.__groups.get(kind, frozenset())

    def __select(
        self, entries: Iterable[Any], options: CardStreamOptions
    ) -> Iterator[Card]:
        check_filter = has_filter_checks(options.filter)
        excluded = options.excluded_groups()
        seen: Set[str] = set()
        skipped = 0

        for entry in entries:
            if not isinstance(entry, dict) or entry.get("object") != constants.CARD_OBJECT_KIND:
                skipped += 1
                LOGGER.debug(f"Skipping malformed card entry in {self.__filepath}")
                if options.on_skip is not None:
                    options.on_skip(entry, "not a card object")
                continue

            if check_filter and not card_matches(entry, options.filter):  # type: ignore[arg-type]
                continue

            if excluded and any(self.is_card_group(entry, kind) for kind in excluded):
                continue

            key = None
            if options.unique_keys is not None or options.unique_once:
                key = unique_card_key(entry)

                if options.unique_keys is not None and key not in options.unique_keys:
                    continue

                if options.unique_once and key in seen:
                    continue

            if options.filter_fn is not None and not options.filter_fn(entry):
                continue

            if options.unique_once and key is not None:
                seen.add(key)

            yield entry

        if skipped:
            LOGGER.warning(f"Skipped {skipped} malformed card entries in {self.__filepath}")
