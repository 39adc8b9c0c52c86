"""Alias resolution.

An alias either links to an external URL or stands in for another
web-referenceable asset (its target). A delegated alias may override any
of the target's display fields; fields it leaves blank are taken from the
target.
"""

from __future__ import annotations

import logging
from datetime import datetime

from ..assets import attributes as attr
from ..assets.types import AssetData, AssetId
from ..errors import AssetServiceError, ConfigurationError, InvalidAliasError, RepositoryAccessError
from ..repository.base import (
    AssetNotFoundError,
    AssociationError,
    AttributeNotDefinedError,
    RepositoryConnection,
    RepositoryError,
)
from ..template import AssetAccessTemplate
from .resolver import WebReferenceableAssetResolver, WraCoreFieldResolver
from .types import (
    ALIAS_ATTRIBUTES,
    Alias,
    AliasProbe,
    AliasStatus,
    DelegatedAlias,
    ExternalAlias,
)


logger = logging.getLogger(__name__)

# Name of the association linking an alias to its target
TARGET_ASSOCIATION = "target"


def _prefer(own: str | None, fallback: str | None) -> str | None:
    return own if attr.good_string(own) else fallback


def _prefer_date(own: datetime | None, fallback: datetime | None) -> datetime | None:
    return own if own is not None else fallback


class AliasResolver:
    """
    Resolves alias assets into ExternalAlias or DelegatedAlias instances.

    Holds no state besides its collaborators; every call re-reads the
    repository.
    """

    def __init__(
        self,
        connection: RepositoryConnection,
        wra_resolver: WebReferenceableAssetResolver | None = None,
        template: AssetAccessTemplate | None = None,
    ):
        if connection is None:
            raise ConfigurationError("connection cannot be None.")
        self.connection = connection
        self.template = template or AssetAccessTemplate(connection)
        self.wra_resolver = wra_resolver or WraCoreFieldResolver(self.template)

    def get_as_asset_data(self, asset_id: AssetId) -> AssetData:
        """
        Read the core alias fields of an asset.

        Raises:
            RepositoryAccessError: If the asset is missing or the read fails
        """
        return self.template.read_one_mapped(asset_id, lambda data: data, ALIAS_ATTRIBUTES)

    def get_alias(self, asset_id: AssetId) -> Alias:
        """
        Resolve an alias.

        Raises:
            InvalidAliasError: If the alias has neither a target association
                nor a target URL, or its target is not web-referenceable
            RepositoryAccessError: On repository failure
        """
        data = self.get_as_asset_data(asset_id)
        target = self._find_target(asset_id)

        if target is None:
            return self._external_alias(asset_id, data)
        return self._delegated_alias(asset_id, data, target)

    def probe_alias(self, asset_id: AssetId) -> AliasProbe:
        """
        Classify an asset as alias, not an alias, or unknown.

        Missing assets and assets whose type lacks the alias attributes are
        NOT_ALIAS. Any other failure is RESOLUTION_FAILED, with the error
        text as the reason.
        """
        try:
            return AliasProbe(AliasStatus.IS_ALIAS, alias=self.get_alias(asset_id))
        except InvalidAliasError as e:
            return AliasProbe(AliasStatus.NOT_ALIAS, reason=str(e))
        except RepositoryAccessError as e:
            if isinstance(e.__cause__, (AssetNotFoundError, AttributeNotDefinedError)):
                return AliasProbe(AliasStatus.NOT_ALIAS, reason=str(e))
            return AliasProbe(AliasStatus.RESOLUTION_FAILED, reason=str(e))
        except AssetServiceError as e:
            return AliasProbe(AliasStatus.RESOLUTION_FAILED, reason=str(e))
        except Exception as e:
            logger.exception(f"Unexpected error resolving alias {asset_id}")
            return AliasProbe(AliasStatus.RESOLUTION_FAILED, reason=f"{type(e).__name__}: {e}")

    def is_alias(self, asset_id: AssetId) -> bool:
        """
        True if the asset resolves as a valid alias.

        A repository failure is also reported as False; use probe_alias to
        tell the two apart.
        """
        probe = self.probe_alias(asset_id)
        if probe.status == AliasStatus.RESOLUTION_FAILED:
            logger.warning(f"Could not determine whether {asset_id} is an alias, reporting False: {probe.reason}")
        return probe.status == AliasStatus.IS_ALIAS

    def _find_target(self, asset_id: AssetId) -> AssetId | None:
        try:
            return self.connection.get_single_association(asset_id, TARGET_ASSOCIATION)
        except AssociationError as e:
            raise InvalidAliasError(f"Alias {asset_id} has more than one target: {e}") from e
        except RepositoryError as e:
            raise RepositoryAccessError(f"Failed to read target of {asset_id}: {e}") from e

    def _read_description(self, asset_id: AssetId) -> str | None:
        """Description of the alias itself; None when its type does not define one."""
        try:
            data = self.template.read_one(asset_id, ("description",))
        except RepositoryAccessError as e:
            if isinstance(e.__cause__, AttributeNotDefinedError):
                logger.debug(f"Alias type {asset_id.type} has no description attribute")
                return None
            raise
        return attr.as_string(data.get_attribute("description")) if data is not None else None

    def _external_alias(self, asset_id: AssetId, data: AssetData) -> ExternalAlias:
        target_url = attr.as_string(data.get_attribute("target_url"))
        if not attr.good_string(target_url):
            raise InvalidAliasError(
                f"Asset is not an alias because it has neither a target_url attribute "
                f"nor a target named association: {asset_id}"
            )
        logger.debug(f"Alias {asset_id} refers to an external URL")

        return ExternalAlias(
            id=asset_id,
            name=attr.get_with_fallback(data, "name"),
            description=self._read_description(asset_id),
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
            popup=attr.as_string(data.get_attribute("popup")),
            link_image=attr.as_asset_id(data.get_attribute("linkimage")),
            target_url=target_url,
        )

    def _delegated_alias(self, asset_id: AssetId, data: AssetData, target: AssetId) -> DelegatedAlias:
        if not self.wra_resolver.is_web_referenceable(target):
            raise InvalidAliasError(
                f"Asset is not a valid alias because it refers to a target asset "
                f"that is not web-referenceable. Alias: {asset_id}, target: {target}"
            )
        wra = self.wra_resolver.get_wra(target)
        logger.debug(f"Alias {asset_id} refers to another wra asset: {target}")

        return DelegatedAlias(
            id=asset_id,
            # Identity fields always come from the alias itself
            name=attr.get_with_fallback(data, "name"),
            description=self._read_description(asset_id),
            subtype=attr.as_string(data.get_attribute("subtype")),
            status=attr.as_string(data.get_attribute("status")),
            start_date=_prefer_date(attr.as_date(data.get_attribute("startdate")), wra.start_date),
            end_date=_prefer_date(attr.as_date(data.get_attribute("enddate")), wra.end_date),
            meta_title=_prefer(attr.get_with_fallback(data, "metatitle"), wra.meta_title),
            meta_description=_prefer(attr.get_with_fallback(data, "metadescription"), wra.meta_description),
            meta_keyword=_prefer(attr.get_with_fallback(data, "metakeyword"), wra.meta_keyword),
            h1_title=_prefer(attr.get_with_fallback(data, "h1title"), wra.h1_title),
            link_text=_prefer(attr.get_with_fallback(data, "linktext", "h1title"), wra.link_text),
            path=_prefer(attr.get_with_fallback(data, "path"), wra.path),
            template=_prefer(attr.get_with_fallback(data, "template"), wra.template),
            popup=attr.as_string(data.get_attribute("popup")),
            link_image=attr.as_asset_id(data.get_attribute("linkimage")),
            target=target,
        )
