"""Web-referenceable asset and alias types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ..assets.types import AssetId


# Attributes every web-referenceable asset type defines
WRA_ATTRIBUTES = (
    "id", "name", "description", "subtype", "status", "startdate", "enddate",
    "metatitle", "metadescription", "metakeyword", "h1title", "linktext",
    "path", "template",
)

# Attributes read for an alias asset
ALIAS_ATTRIBUTES = (
    "metatitle", "metadescription", "metakeyword", "h1title", "linktext",
    "path", "template", "id", "name", "subtype", "startdate", "enddate",
    "status", "target", "target_url", "popup", "linkimage",
)


@dataclass(frozen=True, slots=True)
class WebReferenceableAsset:
    """
    An asset normalized to the fields needed to render and link to it.

    Built only by a WebReferenceableAssetResolver.
    """
    id: AssetId
    name: str | None = None
    description: str | None = None
    subtype: str | None = None
    status: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    meta_keyword: str | None = None
    h1_title: str | None = None
    link_text: str | None = None
    path: str | None = None
    template: str | None = None


class AliasMode(str, Enum):
    """How an alias resolves."""
    EXTERNAL = "external"    # points at an external URL
    DELEGATED = "delegated"  # points at another web-referenceable asset


@dataclass(frozen=True, slots=True)
class Alias(WebReferenceableAsset, ABC):
    """Common fields of both alias variants. Only the variants are instantiable."""
    popup: str | None = None
    link_image: AssetId | None = None

    @property
    @abstractmethod
    def mode(self) -> AliasMode:
        """How this alias resolves."""


@dataclass(frozen=True, slots=True)
class ExternalAlias(Alias):
    """Alias that links to an external URL; no target to fall back to."""
    target_url: str = ""

    @property
    def mode(self) -> AliasMode:
        return AliasMode.EXTERNAL


@dataclass(frozen=True, slots=True)
class DelegatedAlias(Alias):
    """Alias that stands in for a target asset, overriding some of its fields."""
    target: AssetId | None = None

    @property
    def mode(self) -> AliasMode:
        return AliasMode.DELEGATED


class AliasStatus(str, Enum):
    """Outcome of probing whether an asset is an alias."""
    IS_ALIAS = "is_alias"
    NOT_ALIAS = "not_alias"
    RESOLUTION_FAILED = "resolution_failed"  # backend failure, answer unknown


@dataclass(frozen=True, slots=True)
class AliasProbe:
    """Result of AliasResolver.probe_alias."""
    status: AliasStatus
    alias: Alias | None = None
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.status == AliasStatus.IS_ALIAS
