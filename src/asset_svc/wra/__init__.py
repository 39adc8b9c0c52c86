"""Web-referenceable assets, aliases and site ownership."""

from .alias import AliasResolver
from .resolver import WebReferenceableAssetResolver, WraCoreFieldResolver
from .site import SiteOwnershipResolver
from .types import (
    Alias,
    AliasMode,
    AliasProbe,
    AliasStatus,
    DelegatedAlias,
    ExternalAlias,
    WebReferenceableAsset,
)

__all__ = [
    "AliasResolver",
    "WebReferenceableAssetResolver",
    "WraCoreFieldResolver",
    "SiteOwnershipResolver",
    "Alias",
    "AliasMode",
    "AliasProbe",
    "AliasStatus",
    "DelegatedAlias",
    "ExternalAlias",
    "WebReferenceableAsset",
]
