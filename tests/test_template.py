"""Tests for the asset access template."""

import pytest

from asset_svc.assets.scattered import ScatteredAsset
from asset_svc.assets.types import AssetData, AssetId, Condition, OpType, Query
from asset_svc.errors import ConfigurationError, FormatError, RepositoryAccessError
from asset_svc.repository.base import AssetNotFoundError, AttributeNotDefinedError, RepositoryError
from asset_svc.template import AssetAccessTemplate, MappedAssetAccessTemplate

from conftest import ABOUT, CONTACT, HOME, LOGO, MISSING


class TestConstruction:
    def test_none_connection_rejected(self):
        with pytest.raises(ConfigurationError):
            AssetAccessTemplate(None)

    def test_manager_created_once(self, repository, monkeypatch):
        calls = []
        original = repository.get_manager

        def counting():
            calls.append(1)
            return original()

        monkeypatch.setattr(repository, "get_manager", counting)
        template = AssetAccessTemplate(repository)
        template.read_one(HOME)
        template.read_one(ABOUT)
        assert len(calls) == 1

    def test_create_asset_id(self):
        assert AssetAccessTemplate.create_asset_id("Page", "1001") == HOME

    def test_create_asset_id_non_numeric(self):
        with pytest.raises(FormatError):
            AssetAccessTemplate.create_asset_id("Page", "home")

    def test_create_asset_id_out_of_range(self):
        with pytest.raises(FormatError):
            AssetAccessTemplate.create_asset_id("Page", "99999999999999999999")


class TestReadOne:
    def test_existing_asset(self, template):
        data = template.read_one(HOME)
        assert data.asset_id == HOME
        assert data.get_attribute("name") == "home"
        assert data.get_attribute("path") == "/home"

    def test_missing_asset_is_none(self, template):
        assert template.read_one(MISSING) is None

    def test_projection_limits_attributes(self, template):
        data = template.read_one(HOME, ["name", "path"])
        assert data.attribute_names == ["name", "path"]
        assert data.get_attribute("metatitle") is None

    def test_projection_missing_asset_is_none(self, template):
        assert template.read_one(MISSING, ["name"]) is None

    def test_projection_undefined_attribute(self, template):
        with pytest.raises(RepositoryAccessError) as exc_info:
            template.read_one(LOGO, ["name", "path"])
        assert isinstance(exc_info.value.__cause__, AttributeNotDefinedError)

    def test_first_result_wins(self, repository):
        class TwoResultManager:
            def read(self, ids):
                return [AssetData(ids[0], {"name": "first"}), AssetData(ids[0], {"name": "second"})]

        template = AssetAccessTemplate(repository)
        template._manager = TwoResultManager()
        assert template.read_one(HOME).get_attribute("name") == "first"

    def test_repository_error_wrapped(self, repository):
        class FailingManager:
            def read(self, ids):
                raise RepositoryError("backend down")

        template = AssetAccessTemplate(repository)
        template._manager = FailingManager()
        with pytest.raises(RepositoryAccessError, match="backend down"):
            template.read_one(HOME)


class TestReadOneMapped:
    def test_mapper_applied(self, template):
        assert template.read_one_mapped(HOME, lambda d: d.get_attribute("name")) == "home"

    def test_matches_mapping_plain_read(self, template):
        def mapper(data):
            return (data.asset_id, data.get_attribute("path"))

        for asset_id in (HOME, ABOUT, CONTACT, MISSING):
            plain = template.read_one(asset_id)
            expected = mapper(plain) if plain is not None else None
            assert template.read_one_mapped(asset_id, mapper) == expected

    def test_missing_asset_is_none(self, template):
        calls = []
        assert template.read_one_mapped(MISSING, calls.append) is None
        assert calls == []

    def test_projected_read(self, template):
        result = template.read_one_mapped(HOME, lambda d: d.to_dict(), ["id", "path"])
        assert result == {"id": 1001, "path": "/home"}

    def test_projected_missing_asset_raises(self, template):
        with pytest.raises(RepositoryAccessError) as exc_info:
            template.read_one_mapped(MISSING, lambda d: d, ["name"])
        assert isinstance(exc_info.value.__cause__, AssetNotFoundError)


class TestVisitOne:
    def test_closure_called_once(self, template):
        seen = []
        template.visit_one(HOME, seen.append)
        assert [d.asset_id for d in seen] == [HOME]

    def test_closure_not_called_for_missing(self, template):
        seen = []
        template.visit_one(MISSING, seen.append)
        assert seen == []


class TestReadMany:
    def test_all_of_type_in_repository_order(self, template):
        ids = [d.asset_id for d in template.read_many(Query("Page"))]
        assert ids == [HOME, ABOUT, CONTACT]

    def test_is_lazy_iterator(self, template):
        results = template.read_many(Query("Page"))
        assert next(results).asset_id == HOME
        assert next(results).asset_id == ABOUT

    def test_condition_filter(self, template):
        query = Query("Page", (Condition("path", OpType.LIKE, "/a%"),))
        assert [d.asset_id for d in template.read_many(query)] == [ABOUT]

    def test_projection(self, template):
        query = Query("Page", attributes=("name",))
        assert [d.to_dict() for d in template.read_many(query)] == [
            {"name": "home"}, {"name": "about"}, {"name": "contact"},
        ]

    def test_order_by(self, template):
        query = Query("Page", attributes=("name",), order_by=("name",))
        assert [d.get_attribute("name") for d in template.read_many(query)] == ["about", "contact", "home"]

    def test_undefined_condition_attribute(self, template):
        query = Query("Media", (Condition("path", OpType.EQUALS, "/x"),))
        with pytest.raises(RepositoryAccessError):
            template.read_many(query)

    def test_error_during_iteration_wrapped(self, repository):
        def failing_results():
            yield AssetData(HOME, {"name": "home"})
            raise RepositoryError("connection lost")

        class FailingManager:
            def search(self, query):
                return failing_results()

        template = AssetAccessTemplate(repository)
        template._manager = FailingManager()
        results = template.read_many(Query("Page"))
        assert next(results).asset_id == HOME
        with pytest.raises(RepositoryAccessError, match="connection lost"):
            next(results)

    def test_visit_many(self, template):
        seen = []
        template.visit_many(Query("Page"), lambda d: seen.append(d.get_attribute("name")))
        assert seen == ["home", "about", "contact"]

    def test_read_many_mapped_is_list(self, template):
        names = template.read_many_mapped(Query("Page"), lambda d: d.get_attribute("name"))
        assert names == ["home", "about", "contact"]


class TestNameLookup:
    def test_build_name_query(self):
        query = AssetAccessTemplate.build_name_query("Page", "home")
        assert query.asset_type == "Page"
        assert query.conditions == (Condition("name", OpType.EQUALS, "home"),)
        assert query.attributes == ("id",)
        assert query.basic_search

    def test_find_then_read_round_trip(self, template):
        for name in ("home", "about", "contact"):
            asset_id = template.find_id_by_name("Page", name)
            assert template.read_one(asset_id).get_attribute("name") == name

    def test_unknown_name(self, template):
        assert template.find_id_by_name("Page", "nope") is None

    def test_duplicate_name_returns_first(self, repository, template):
        repository.add_asset(AssetId("Page", 1500), "home")
        assert template.find_id_by_name("Page", "home") == HOME


class TestMappedTemplate:
    def test_read(self, repository):
        asset = MappedAssetAccessTemplate(repository).read(HOME)
        assert isinstance(asset, ScatteredAsset)
        assert asset["path"] == "/home"

    def test_read_missing(self, repository):
        assert MappedAssetAccessTemplate(repository).read(MISSING) is None

    def test_read_current_projection(self, repository):
        asset = MappedAssetAccessTemplate(repository).read_current("Page", "1001", "name", "startdate")
        assert dict(asset) == {"name": "home", "startdate": asset.get_date("startdate")}
        assert asset.get_date("startdate").year == 2024

    def test_read_current_bad_id(self, repository):
        with pytest.raises(FormatError):
            MappedAssetAccessTemplate(repository).read_current("Page", "home")
