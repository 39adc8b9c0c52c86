"""Asset identity, attribute bags, queries and attribute coercion."""

from .types import AssetClosure, AssetData, AssetId, AssetMapper, Condition, OpType, Query
from .scattered import ScatteredAsset

__all__ = [
    "AssetClosure",
    "AssetData",
    "AssetId",
    "AssetMapper",
    "Condition",
    "OpType",
    "Query",
    "ScatteredAsset",
]
