"""Backing repository contract and the SQLite reference backend."""

from .base import (
    AssetDataManager,
    AssetNotFoundError,
    AssociationError,
    AttributeNotDefinedError,
    RepositoryConnection,
    RepositoryError,
)
from .loader import RepositoryLoader, load_repository
from .sqlite import SqliteRepository

__all__ = [
    "AssetDataManager",
    "AssetNotFoundError",
    "AssociationError",
    "AttributeNotDefinedError",
    "RepositoryConnection",
    "RepositoryError",
    "RepositoryLoader",
    "load_repository",
    "SqliteRepository",
]
