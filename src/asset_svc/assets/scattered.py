"""Scattered asset - a read-only mapping view over one AssetData."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Iterator

from . import attributes
from .types import AssetData, AssetId


class ScatteredAsset(Mapping):
    """
    Attribute name -> raw value view of an asset, with typed getters.

    Only the attributes present on the underlying AssetData are visible.
    """

    def __init__(self, data: AssetData):
        self._data = data
        self._values = data.to_dict()

    @property
    def asset_id(self) -> AssetId:
        return self._data.asset_id

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def get_string(self, name: str) -> str | None:
        return attributes.as_string(self._values.get(name))

    def get_date(self, name: str) -> datetime | None:
        return attributes.as_date(self._values.get(name))

    def get_asset_id(self, name: str) -> AssetId | None:
        return attributes.as_asset_id(self._values.get(name))

    def get_long(self, name: str) -> int | None:
        return attributes.as_long(self._values.get(name))

    def __repr__(self) -> str:
        return f"ScatteredAsset({self.asset_id}, {self._values!r})"
