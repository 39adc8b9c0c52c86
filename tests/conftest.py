"""Shared test fixtures for the asset service.

Every test gets a fresh in-memory SQLite repository loaded with a small
site: pages, a media asset that is not web-referenceable, and aliases
covering both resolution modes and the invalid cases.
"""

from datetime import datetime

import pytest

from asset_svc.assets.types import AssetId
from asset_svc.repository.loader import RepositoryLoader
from asset_svc.repository.sqlite import SqliteRepository
from asset_svc.template import AssetAccessTemplate
from asset_svc.wra.alias import AliasResolver
from asset_svc.wra.site import SiteOwnershipResolver


WRA_TYPE_ATTRIBUTES = [
    "description", "subtype", "status", "startdate", "enddate",
    "metatitle", "metadescription", "metakeyword", "h1title", "linktext",
    "path", "template",
]

ALIAS_TYPE_ATTRIBUTES = WRA_TYPE_ATTRIBUTES + ["target", "target_url", "popup", "linkimage"]


REPOSITORY_DATA = {
    "types": {
        "Page": WRA_TYPE_ATTRIBUTES,
        "GSTAlias": ALIAS_TYPE_ATTRIBUTES,
        "Media": ["caption", "filename"],
    },
    "assets": [
        {
            "id": "Page:1001",
            "name": "home",
            "attributes": {
                "description": "Landing page",
                "subtype": "Home",
                "status": "PL",
                "startdate": datetime(2024, 1, 1),
                "enddate": datetime(2024, 12, 31),
                "metatitle": "Target Title",
                "metadescription": "Everything about us",
                "metakeyword": "home,landing",
                "h1title": "Home",
                "linktext": "Go Home",
                "path": "/home",
                "template": "PageLayout",
            },
            "sites": ["Site1"],
        },
        {
            "id": "Page:1002",
            "name": "about",
            "attributes": {
                "h1title": "About Us",
                "linktext": "",
                "path": "/about",
            },
            "sites": ["Site1", "Site2"],
        },
        {
            "id": "Page:1003",
            "name": "contact",
            "attributes": {"path": "/contact"},
        },
        {
            "id": "Media:2001",
            "name": "logo",
            "attributes": {"caption": "Company logo", "filename": "logo.png"},
            "sites": ["Site2"],
        },
        {
            "id": "GSTAlias:3001",
            "name": "home-alias",
            "attributes": {"linktext": "", "h1title": "  "},
            "associations": {"target": "Page:1001"},
            "sites": ["Site2"],
        },
        {
            "id": "GSTAlias:3002",
            "name": "titled-alias",
            "attributes": {
                "metatitle": "Alias Title",
                "startdate": datetime(2025, 2, 1),
                "path": "/promo/home",
            },
            "associations": {"target": "Page:1001"},
        },
        {
            "id": "GSTAlias:3003",
            "name": "external",
            "attributes": {
                "target_url": "https://example.com/partner",
                "linktext": "",
                "h1title": "Welcome",
                "popup": "true",
                "linkimage": {"asset": "Media:2001"},
            },
        },
        {
            "id": "GSTAlias:3004",
            "name": "broken",
            "attributes": {"target_url": ""},
        },
        {
            "id": "GSTAlias:3005",
            "name": "media-alias",
            "attributes": {},
            "associations": {"target": "Media:2001"},
        },
        {
            "id": "GSTAlias:3006",
            "name": "no-url",
            "attributes": {"h1title": "Nowhere"},
        },
    ],
}


HOME = AssetId("Page", 1001)
ABOUT = AssetId("Page", 1002)
CONTACT = AssetId("Page", 1003)
LOGO = AssetId("Media", 2001)
HOME_ALIAS = AssetId("GSTAlias", 3001)
TITLED_ALIAS = AssetId("GSTAlias", 3002)
EXTERNAL_ALIAS = AssetId("GSTAlias", 3003)
BROKEN_ALIAS = AssetId("GSTAlias", 3004)
MEDIA_ALIAS = AssetId("GSTAlias", 3005)
NO_URL_ALIAS = AssetId("GSTAlias", 3006)
MISSING = AssetId("Page", 9999)


@pytest.fixture
def repository():
    """In-memory repository loaded with the test site."""
    repo = SqliteRepository.open(":memory:")
    RepositoryLoader(repo).load_dict(REPOSITORY_DATA)
    yield repo
    repo.close()


@pytest.fixture
def template(repository) -> AssetAccessTemplate:
    return AssetAccessTemplate(repository)


@pytest.fixture
def alias_resolver(repository) -> AliasResolver:
    return AliasResolver(repository)


@pytest.fixture
def site_resolver(repository) -> SiteOwnershipResolver:
    return SiteOwnershipResolver(repository)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks as integration test")
