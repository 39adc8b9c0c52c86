"""Web-referenceable asset resolution."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ..assets import attributes as attr
from ..assets.types import AssetData, AssetId
from ..errors import AssetServiceError, NotWebReferenceableError
from ..template import AssetAccessTemplate
from .types import WRA_ATTRIBUTES, WebReferenceableAsset


logger = logging.getLogger(__name__)


class WebReferenceableAssetResolver(ABC):
    """Contract for turning an asset into a WebReferenceableAsset."""

    @abstractmethod
    def get_wra(self, asset_id: AssetId) -> WebReferenceableAsset:
        """
        Resolve an asset into a WebReferenceableAsset.

        Raises:
            NotWebReferenceableError: If the asset cannot be resolved
            RepositoryAccessError: On repository failure
        """
        ...

    @abstractmethod
    def is_web_referenceable(self, asset_id: AssetId) -> bool:
        """True if the asset can be resolved. Never raises; False when in doubt."""
        ...


def map_wra(data: AssetData) -> WebReferenceableAsset:
    """Build a WebReferenceableAsset from AssetData holding the WRA attributes."""
    return WebReferenceableAsset(
        id=data.asset_id,
        name=attr.get_with_fallback(data, "name"),
        description=attr.as_string(data.get_attribute("description")),
        subtype=attr.as_string(data.get_attribute("subtype")),
        status=attr.as_string(data.get_attribute("status")),
        start_date=attr.as_date(data.get_attribute("startdate")),
        end_date=attr.as_date(data.get_attribute("enddate")),
        meta_title=attr.get_with_fallback(data, "metatitle"),
        meta_description=attr.get_with_fallback(data, "metadescription"),
        meta_keyword=attr.get_with_fallback(data, "metakeyword"),
        h1_title=attr.get_with_fallback(data, "h1title"),
        link_text=attr.get_with_fallback(data, "linktext", "h1title"),
        path=attr.as_string(data.get_attribute("path")),
        template=attr.as_string(data.get_attribute("template")),
    )


class WraCoreFieldResolver(WebReferenceableAssetResolver):
    """
    Resolves WRAs by reading the core WRA attributes through the template.

    An asset is web-referenceable when it exists and its type defines
    every attribute in WRA_ATTRIBUTES.
    """

    def __init__(self, template: AssetAccessTemplate):
        self.template = template

    def get_wra(self, asset_id: AssetId) -> WebReferenceableAsset:
        data = self.template.read_one(asset_id, WRA_ATTRIBUTES)
        if data is None:
            raise NotWebReferenceableError(f"Asset not found: {asset_id}")
        return map_wra(data)

    def is_web_referenceable(self, asset_id: AssetId) -> bool:
        try:
            self.get_wra(asset_id)
            return True
        except AssetServiceError as e:
            logger.debug(f"{asset_id} is not web-referenceable: {e}")
            return False
