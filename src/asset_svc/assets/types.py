"""Core asset types - identifiers, attribute bags and queries."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterator, TypeVar

from ..errors import FormatError


T = TypeVar("T")

# Asset ids are signed 64-bit integers
MIN_ASSET_ID = -(2 ** 63)
MAX_ASSET_ID = 2 ** 63 - 1

_ID_PATTERN = re.compile(r"[+-]?[0-9]+", re.ASCII)


@dataclass(frozen=True, slots=True)
class AssetId:
    """
    Identity of one content item: asset type plus numeric id.

    Examples:
        AssetId("Page", 1001)
        AssetId.parse("GSTAlias:1327351719456")
    """
    type: str
    id: int

    def __post_init__(self):
        if isinstance(self.id, bool) or not isinstance(self.id, int):
            raise FormatError(f"Asset id must be an integer, got: {self.id!r}")
        if not MIN_ASSET_ID <= self.id <= MAX_ASSET_ID:
            raise FormatError(f"Asset id out of 64-bit range: {self.id}")

    def __str__(self) -> str:
        return f"{self.type}:{self.id}"

    @classmethod
    def of(cls, asset_type: str, cid: str | int) -> AssetId:
        """
        Build an AssetId from a type and an int or decimal string id.

        Raises:
            FormatError: If cid is not a plain decimal integer or does not
                fit in 64 bits
        """
        if isinstance(cid, int):
            return cls(asset_type, cid)
        if not isinstance(cid, str) or not _ID_PATTERN.fullmatch(cid):
            raise FormatError(f"Asset id must be numeric, got: {cid!r}")
        return cls(asset_type, int(cid))

    @classmethod
    def parse(cls, text: str) -> AssetId:
        """Parse the ``type:id`` text form."""
        asset_type, sep, cid = text.partition(":")
        if not sep or not asset_type:
            raise FormatError(f"Expected 'type:id', got: {text!r}")
        return cls.of(asset_type, cid)


class AssetData:
    """
    Attribute bag for one asset as returned by the repository.

    Values are untyped; use the helpers in ``attributes`` to coerce them.
    Only the attributes that were read are present - a projected read
    leaves every other attribute absent.
    """

    __slots__ = ("_asset_id", "_attributes")

    def __init__(self, asset_id: AssetId, attributes: dict[str, Any] | None = None):
        self._asset_id = asset_id
        self._attributes = dict(attributes or {})

    @property
    def asset_id(self) -> AssetId:
        return self._asset_id

    @property
    def attribute_names(self) -> list[str]:
        return list(self._attributes.keys())

    def get_attribute(self, name: str) -> Any | None:
        """Raw value of an attribute, or None if it is absent or unset."""
        return self._attributes.get(name)

    def has_attribute(self, name: str) -> bool:
        return name in self._attributes

    def to_dict(self) -> dict[str, Any]:
        return dict(self._attributes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._attributes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AssetData):
            return NotImplemented
        return self._asset_id == other._asset_id and self._attributes == other._attributes

    def __repr__(self) -> str:
        return f"AssetData({self._asset_id}, {self._attributes!r})"


class OpType(str, Enum):
    """Comparison operators supported in query conditions."""
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    LIKE = "like"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"


@dataclass(frozen=True, slots=True)
class Condition:
    """A single ``attribute <op> value`` filter."""
    attribute: str
    op: OpType
    value: Any


@dataclass(frozen=True, slots=True)
class Query:
    """
    A read query: asset type, filter conditions and requested attributes.

    Conditions are AND-ed. ``attributes`` of None requests every attribute.
    ``basic_search`` asks the repository for its cheap index-only search path.
    ``order_by`` names attributes to sort by; without it the order is
    whatever the repository returns.
    """
    asset_type: str
    conditions: tuple[Condition, ...] = ()
    attributes: tuple[str, ...] | None = None
    basic_search: bool = False
    order_by: tuple[str, ...] = field(default=())


# A mapper turns one AssetData into a value; a closure consumes it.
AssetMapper = Callable[[AssetData], T]
AssetClosure = Callable[[AssetData], None]
