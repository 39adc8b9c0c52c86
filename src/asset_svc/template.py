"""Asset access template - read-only access to repository assets.

One entry point for reading AssetData, modelled on data access
templates: the caller supplies an AssetId or a Query plus an optional
projection, mapper or closure, and the template deals with the
repository's native read API and error types.

Every repository failure surfaces as RepositoryAccessError. Nothing is
cached or retried; each call goes back to the repository.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterator, Sequence, TypeVar

from .assets.scattered import ScatteredAsset
from .assets.types import AssetClosure, AssetData, AssetId, AssetMapper, Condition, OpType, Query
from .errors import ConfigurationError, RepositoryAccessError
from .repository.base import AssetDataManager, AssetNotFoundError, RepositoryConnection, RepositoryError


logger = logging.getLogger(__name__)

T = TypeVar("T")


class AssetAccessTemplate:
    """
    Read-only access to assets through a repository connection.

    The connection is owned by the caller and must outlive the template.
    The template only owns its handle to the read manager, created on
    first use. Not safe for concurrent use: give each thread its own
    template bound to its own connection.
    """

    def __init__(self, connection: RepositoryConnection):
        if connection is None:
            raise ConfigurationError("connection cannot be None.")
        self._connection = connection
        self._manager: AssetDataManager | None = None
        self._manager_lock = threading.Lock()

    @property
    def connection(self) -> RepositoryConnection:
        return self._connection

    def get_manager(self) -> AssetDataManager:
        """Return the read manager, creating it exactly once."""
        if self._manager is None:
            with self._manager_lock:
                if self._manager is None:
                    self._manager = self._connection.get_manager()
                    logger.debug(f"Acquired asset data manager {type(self._manager).__name__}")
        return self._manager

    @staticmethod
    def create_asset_id(asset_type: str, cid: str | int) -> AssetId:
        """
        Build an AssetId from a type and an int or decimal string id.

        Raises:
            FormatError: If cid is not numeric
        """
        return AssetId.of(asset_type, cid)

    # =========================================================================
    # Single asset reads
    # =========================================================================

    def read_one(self, asset_id: AssetId, attributes: Sequence[str] | None = None) -> AssetData | None:
        """
        Read one asset.

        If the repository returns several results the first is returned and
        the rest are discarded.

        Args:
            asset_id: The asset to read
            attributes: Optional projection; only these attributes are read

        Returns:
            The AssetData, or None if the asset does not exist

        Raises:
            RepositoryAccessError: On any other repository failure, including
                a projection that names an undefined attribute
        """
        if attributes is not None:
            try:
                return self.get_manager().read_attributes(asset_id, list(attributes))
            except AssetNotFoundError:
                return None
            except RepositoryError as e:
                raise RepositoryAccessError(f"Failed to read {asset_id}: {e}") from e

        try:
            for data in self.get_manager().read([asset_id]):
                return data
        except RepositoryError as e:
            raise RepositoryAccessError(f"Failed to read {asset_id}: {e}") from e
        return None

    def read_one_mapped(
        self,
        asset_id: AssetId,
        mapper: AssetMapper[T],
        attributes: Sequence[str] | None = None,
    ) -> T | None:
        """
        Read one asset and transform it with ``mapper``.

        Without a projection a missing asset yields None. With a projection
        the read must succeed: a missing asset raises RepositoryAccessError.
        """
        if attributes is None:
            data = self.read_one(asset_id)
            return mapper(data) if data is not None else None

        try:
            data = self.get_manager().read_attributes(asset_id, list(attributes))
        except RepositoryError as e:
            raise RepositoryAccessError(f"Failed to read {asset_id}: {e}") from e
        return mapper(data)

    def visit_one(self, asset_id: AssetId, closure: AssetClosure) -> None:
        """Invoke ``closure`` for each result of reading ``asset_id`` (zero or one)."""
        try:
            for data in self.get_manager().read([asset_id]):
                closure(data)
        except RepositoryError as e:
            raise RepositoryAccessError(f"Failed to read {asset_id}: {e}") from e

    # =========================================================================
    # Query reads
    # =========================================================================

    def read_many(self, query: Query) -> Iterator[AssetData]:
        """
        Lazily iterate over every asset matching ``query``.

        The iterator is single-pass and follows repository order. A
        repository failure while iterating ends the iteration with
        RepositoryAccessError.
        """
        try:
            results = self.get_manager().search(query)
        except RepositoryError as e:
            raise RepositoryAccessError(f"Query on {query.asset_type} failed: {e}") from e
        return self._wrap_errors(query, iter(results))

    def visit_many(self, query: Query, closure: AssetClosure) -> None:
        """Invoke ``closure`` once per asset matching ``query``, in repository order."""
        for data in self.read_many(query):
            closure(data)

    def read_many_mapped(self, query: Query, mapper: AssetMapper[T]) -> list[T]:
        """Read every asset matching ``query`` and transform each with ``mapper``."""
        return [mapper(data) for data in self.read_many(query)]

    @staticmethod
    def _wrap_errors(query: Query, results: Iterator[AssetData]) -> Iterator[AssetData]:
        try:
            yield from results
        except RepositoryError as e:
            raise RepositoryAccessError(f"Query on {query.asset_type} failed: {e}") from e

    # =========================================================================
    # Name lookups
    # =========================================================================

    def find_id_by_name(self, asset_type: str, name: str) -> AssetId | None:
        """
        Find an asset by name.

        Names are not unique in the repository; when several assets share
        the name, the first one the repository returns wins.
        """
        for data in self.read_many(self.build_name_query(asset_type, name)):
            return AssetId(asset_type, int(data.get_attribute("id")))
        return None

    @staticmethod
    def build_name_query(asset_type: str, name: str) -> Query:
        """Query selecting only the id of assets with the given name."""
        return Query(
            asset_type=asset_type,
            conditions=(Condition("name", OpType.EQUALS, name),),
            attributes=("id",),
            basic_search=True,
        )


class MappedAssetAccessTemplate(AssetAccessTemplate):
    """Template that returns ScatteredAsset views instead of raw AssetData."""

    def read(self, asset_id: AssetId) -> ScatteredAsset | None:
        return self.read_one_mapped(asset_id, ScatteredAsset)

    def read_current(self, asset_type: str, cid: str | int, *attributes: str) -> ScatteredAsset | None:
        """Read the listed attributes of ``asset_type:cid``, or all of them if none are listed."""
        asset_id = self.create_asset_id(asset_type, cid)
        return self.read_one_mapped(asset_id, ScatteredAsset, attributes or None)
