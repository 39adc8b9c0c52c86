"""Repository loader - populates a SQLite repository from YAML/JSON documents."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from ..assets.types import AssetId
from .sqlite import SqliteRepository


logger = logging.getLogger(__name__)


class RepositoryLoader:
    """
    Loads asset types, assets, associations and site ownership.

    File format:
    ```yaml
    types:
      Page: [metatitle, h1title, linktext, path, template]

    assets:
      - id: Page:1001
        name: home
        attributes:
          path: /home
          startdate: 2024-01-01
          linkimage: {asset: "Media:2001"}
        sites: [Site1]

      - id: GSTAlias:3001
        name: home-alias
        attributes:
          linktext: Go home
        associations:
          target: Page:1001
    ```

    Attribute values of the form ``{asset: "type:id"}`` are stored as
    asset references.
    """

    def __init__(self, repository: SqliteRepository):
        self.repository = repository

    def load_file(self, path: str | Path) -> SqliteRepository:
        """Load repository content from a YAML or JSON file."""
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Repository fixture file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                import json
                data = json.load(f)

        return self.load_dict(data or {})

    def load_dict(self, data: dict[str, Any]) -> SqliteRepository:
        """Load repository content from a dictionary."""
        for asset_type, attributes in (data.get("types") or {}).items():
            self.repository.define_type(asset_type, attributes or [])
            logger.debug(f"Defined asset type: {asset_type}")

        assets = data.get("assets") or []
        # Associations may point forward, so link after every asset exists
        for asset_data in assets:
            self._load_asset(asset_data)
        for asset_data in assets:
            self._load_links(asset_data)

        logger.info(f"Loaded {len(assets)} assets")
        return self.repository

    def _load_asset(self, data: dict[str, Any]) -> None:
        asset_id = AssetId.parse(str(data["id"]))
        attributes = {
            name: self._parse_value(value)
            for name, value in (data.get("attributes") or {}).items()
        }
        self.repository.add_asset(asset_id, data.get("name", ""), attributes)
        logger.debug(f"Loaded asset: {asset_id}")

    def _load_links(self, data: dict[str, Any]) -> None:
        asset_id = AssetId.parse(str(data["id"]))
        for name, target in (data.get("associations") or {}).items():
            self.repository.add_association(asset_id, name, AssetId.parse(str(target)))
        for site in data.get("sites") or []:
            self.repository.share(asset_id, site)

    @staticmethod
    def _parse_value(value: Any) -> Any:
        if isinstance(value, dict) and "asset" in value:
            return AssetId.parse(str(value["asset"]))
        return value


def load_repository(path: str | Path, repository: SqliteRepository | None = None) -> SqliteRepository:
    """Convenience function to load a fixture file into a repository."""
    repository = repository or SqliteRepository.open()
    return RepositoryLoader(repository).load_file(path)
