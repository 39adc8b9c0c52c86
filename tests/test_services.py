"""Tests for the service bundle."""

from pathlib import Path

import pytest

from asset_svc.assets.types import AssetId
from asset_svc.config import Config
from asset_svc.services import AssetServices
from asset_svc.wra.types import AliasMode


SAMPLE_REPOSITORY = Path(__file__).parent.parent / "sample_repository.yaml"


@pytest.mark.integration
class TestAssetServices:
    def test_from_config_with_fixtures(self):
        config = Config.from_dict({"repository": {"fixtures_file": str(SAMPLE_REPOSITORY)}})
        with AssetServices.from_config(config) as services:
            alias = services.aliases.get_alias(AssetId("GSTAlias", 3001))
            assert alias.mode == AliasMode.DELEGATED
            assert alias.link_text == "Go Home"
            assert services.sites.resolve_site("Page", "1001") == "Site1"
            assert services.template.find_id_by_name("Page", "home") == AssetId("Page", 1001)

    def test_shared_template(self):
        with AssetServices.from_config(Config()) as services:
            assert services.aliases.template is services.template
            assert services.wra.template is services.template

    def test_file_database(self, tmp_path):
        config = Config.from_dict({"repository": {"db_path": str(tmp_path / "assets.db")}})
        with AssetServices.from_config(config) as services:
            services.repository.add_asset(AssetId("Page", 1), "one", {"path": "/one"})
        with AssetServices.from_config(config) as services:
            assert services.template.read_one(AssetId("Page", 1)).get_attribute("path") == "/one"
