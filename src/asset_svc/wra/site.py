"""Site ownership lookup."""

from __future__ import annotations

import logging

from ..assets.types import AssetId
from ..errors import ConfigurationError, RepositoryAccessError
from ..repository.base import RepositoryConnection, RepositoryError


logger = logging.getLogger(__name__)

# Ordered by the ownership row id so the first site found is stable
ASSET_PUBLICATION_QUERY = (
    "SELECT p.name FROM Publication p, AssetPublication ap "
    "WHERE ap.assettype = ? "
    "AND ap.assetid = ? "
    "AND ap.pubid = p.id "
    "ORDER BY ap.id"
)
ASSET_PUBLICATION_TABLES = ("AssetPublication", "Publication")


class SiteOwnershipResolver:
    """
    Maps an asset to the name of the publication (site) that owns it.

    An asset owned by several publications is an anomaly - aliases are
    the way to share content across sites - so the first site is used and
    a warning is logged instead of failing.
    """

    def __init__(self, connection: RepositoryConnection):
        if connection is None:
            raise ConfigurationError("connection cannot be None.")
        self.connection = connection

    def resolve_site(self, asset_type: str, asset_id: str) -> str | None:
        """
        Resolve the owning site of ``asset_type:asset_id``.

        Args:
            asset_type: The asset type
            asset_id: The numeric asset id as a string

        Returns:
            The site name, or None if no publication owns the asset

        Raises:
            FormatError: If asset_id is not numeric
            RepositoryAccessError: On repository failure
        """
        asset = AssetId.of(asset_type, asset_id)

        try:
            sites = [
                row["name"]
                for row in self.connection.select(
                    ASSET_PUBLICATION_QUERY,
                    (asset.type, asset.id),
                    ASSET_PUBLICATION_TABLES,
                )
            ]
        except RepositoryError as e:
            raise RepositoryAccessError(f"Failed to resolve site for {asset}: {e}") from e

        if not sites:
            return None
        if len(sites) > 1:
            logger.warning(
                f"Found asset {asset} in more than one publication ({', '.join(sites)}). "
                f"It should not be shared; aliases are to be used for cross-site sharing. "
                f"Using first site found: {sites[0]}"
            )
        return sites[0]
