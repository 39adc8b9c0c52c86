"""Backing repository contract consumed by the asset service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, Iterator, Mapping, Sequence

from ..assets.types import AssetData, AssetId, Query


class RepositoryError(Exception):
    """Base exception for errors reported by a repository backend."""
    pass


class AssetNotFoundError(RepositoryError):
    """Raised when a requested asset does not exist."""
    pass


class AttributeNotDefinedError(RepositoryError):
    """Raised when a projection names an attribute the asset type does not define."""
    pass


class AssociationError(RepositoryError):
    """Raised when a single-valued association holds more than one target."""
    pass


# A row from a parameterized select, addressable by column name.
Row = Mapping[str, Any]


class AssetDataManager(ABC):
    """
    Native read API of the repository.

    Implementations raise RepositoryError (or a subclass) on failure.
    """

    @abstractmethod
    def read(self, ids: Sequence[AssetId]) -> Iterable[AssetData]:
        """
        Read the full attribute set of each listed asset.

        Missing assets are skipped; the result may be empty.
        """
        ...

    @abstractmethod
    def read_attributes(self, asset_id: AssetId, attributes: Sequence[str]) -> AssetData:
        """
        Read only the listed attributes of one asset.

        Raises:
            AssetNotFoundError: If the asset does not exist
            AttributeNotDefinedError: If an attribute is not defined for the type
        """
        ...

    @abstractmethod
    def search(self, query: Query) -> Iterable[AssetData]:
        """Read every asset matching the query, in repository order."""
        ...


class RepositoryConnection(ABC):
    """
    A session against the repository.

    Supplies the read manager, named association lookup and a
    parameterized select facility. Owned by the caller; the asset service
    never closes it.
    """

    @abstractmethod
    def get_manager(self) -> AssetDataManager:
        """Return the asset read manager for this session."""
        ...

    @abstractmethod
    def get_single_association(self, asset_id: AssetId, name: str) -> AssetId | None:
        """
        Return the target of a named single-valued association, or None.

        Raises:
            AssociationError: If more than one target is associated
        """
        ...

    @abstractmethod
    def select(
        self,
        sql: str,
        params: Sequence[Any] = (),
        tables: Sequence[str] = (),
    ) -> Iterator[Row]:
        """
        Run a parameterized select and iterate over its rows.

        ``tables`` lists the tables the statement reads, for backends that
        track dependencies; it does not change the result.
        """
        ...
