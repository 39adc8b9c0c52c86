"""Service bundle - wires the template and resolvers over one repository."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .config import Config, configure_logging
from .repository.loader import RepositoryLoader
from .repository.sqlite import SqliteRepository
from .template import AssetAccessTemplate
from .wra.alias import AliasResolver
from .wra.resolver import WraCoreFieldResolver
from .wra.site import SiteOwnershipResolver


logger = logging.getLogger(__name__)


@dataclass
class AssetServices:
    """
    Template, WRA resolver, alias resolver and site resolver sharing one
    repository connection.

    Like its parts, a bundle is meant for a single thread.
    """
    repository: SqliteRepository
    template: AssetAccessTemplate = field(init=False)
    wra: WraCoreFieldResolver = field(init=False)
    aliases: AliasResolver = field(init=False)
    sites: SiteOwnershipResolver = field(init=False)

    def __post_init__(self):
        self.template = AssetAccessTemplate(self.repository)
        self.wra = WraCoreFieldResolver(self.template)
        self.aliases = AliasResolver(self.repository, wra_resolver=self.wra, template=self.template)
        self.sites = SiteOwnershipResolver(self.repository)

    @classmethod
    def from_config(cls, config: Config, setup_logging: bool = False) -> AssetServices:
        """Open the configured repository, load its fixtures and wire the services."""
        if setup_logging:
            configure_logging(config.logging)

        repository = SqliteRepository.open(config.repository.db_path)
        if config.repository.fixtures_file:
            RepositoryLoader(repository).load_file(config.repository.fixtures_file)
        logger.info(f"Asset services ready on {config.repository.db_path}")
        return cls(repository=repository)

    def close(self) -> None:
        self.repository.close()

    def __enter__(self) -> AssetServices:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
