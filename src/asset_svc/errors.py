"""Exceptions raised by the asset service."""

from __future__ import annotations


class AssetServiceError(Exception):
    """Base exception for asset service errors."""
    pass


class RepositoryAccessError(AssetServiceError):
    """Raised when the backing repository fails during a read.

    The repository's own error is chained as ``__cause__``.
    """
    pass


class InvalidAliasError(AssetServiceError):
    """Raised when an alias has neither a target nor a target URL,
    or when its target is not web-referenceable."""
    pass


class NotWebReferenceableError(AssetServiceError):
    """Raised when an asset cannot be resolved as a web-referenceable asset."""
    pass


class FormatError(AssetServiceError, ValueError):
    """Raised when an identifier string is not in the expected numeric form."""
    pass


class ConfigurationError(AssetServiceError):
    """Raised when a required collaborator or setting is missing or invalid."""
    pass
