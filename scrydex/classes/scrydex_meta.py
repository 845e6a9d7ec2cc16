"""
Scrydex Card Database Meta Object
"""

from typing import Any, Dict, FrozenSet, Iterator, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_serializer, model_validator
from pydantic.alias_generators import to_camel

from .. import constants

CardDBType = Literal["inventory", "sorted", "sorted_format"]
GroupKind = Literal["decks", "external", "proxy"]


class ScrydexGroupsObject(BaseModel):
    """
    Source filenames tagged under each group kind. Unknown kinds are dropped.
    """

    decks: Optional[FrozenSet[str]] = None
    external: Optional[FrozenSet[str]] = None
    proxy: Optional[FrozenSet[str]] = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_serializer("decks", "external", "proxy", when_used="json")
    def serialize_filenames(self, value: Optional[FrozenSet[str]]) -> Any:
        """Sets are stored as sorted arrays."""
        return sorted(value) if value is not None else None

    def get(self, kind: str) -> FrozenSet[str]:
        """
        Filenames belonging to a group
        :param kind: Group kind
        :return: Filenames, empty when the group is not defined
        """
        if kind not in constants.GROUP_KINDS:
            return frozenset()
        return getattr(self, kind) or frozenset()

    def items(self) -> Iterator[Tuple[str, FrozenSet[str]]]:
        """
        Iterate over the defined groups
        :return: (group kind, filenames) pairs
        """
        for kind in constants.GROUP_KINDS:
            filenames = getattr(self, kind)
            if filenames is not None:
                yield kind, filenames


class ScrydexMetaObject(BaseModel):
    """
    Scrydex Card Database Meta Object
    """

    name: str
    type: CardDBType
    format: Optional[str] = None
    groups: Optional[ScrydexGroupsObject] = None
    cli_version: str
    schema_version: str
    generated_at: str

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def check_sorted_format(self) -> "ScrydexMetaObject":
        """A sorted format database must name a supported game format."""
        if self.type == "sorted_format" and self.format not in constants.SUPPORTED_FORMATS:
            raise ValueError(
                f"'sorted_format' requires a supported game format, got: {self.format}"
            )
        return self

    def to_json(self) -> Dict[str, Any]:
        """
        Support json dumping
        :return: JSON serialized object
        """
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
