"""Unit tests for the content schemas and tracked collections."""

import pytest

from modules.content import DEFAULT_COLLECTIONS, NAVIGATION, RESOURCES, SITE
from modules.content.schemas import DEFAULT_NAVIGATION, DEFAULT_SITE_CONFIG
from modules.content.tracked import collections_by_name

pytestmark = pytest.mark.unit

COLLECTIONS = collections_by_name()


class TestDefaults:
    def test_defaults_are_valid(self):
        assert COLLECTIONS[NAVIGATION].validate(DEFAULT_NAVIGATION) == []
        assert COLLECTIONS[SITE].validate(DEFAULT_SITE_CONFIG) == []
        assert COLLECTIONS[RESOURCES].validate([]) == []

    def test_default_factory_returns_copies(self):
        first = COLLECTIONS[NAVIGATION].default()
        first.append({"id": "extra"})

        assert COLLECTIONS[NAVIGATION].default() == DEFAULT_NAVIGATION

    def test_collection_settings(self):
        assert [c.name for c in DEFAULT_COLLECTIONS] == [NAVIGATION, SITE, RESOURCES]
        assert COLLECTIONS[SITE].cache_ttl == 1800
        assert COLLECTIONS[NAVIGATION].cache_ttl == 600
        assert COLLECTIONS[RESOURCES].write_default is False
        assert COLLECTIONS[SITE].cache_key == "content:site"


class TestNavigationValidation:
    def _item(self, **overrides):
        item = {
            "id": "docs",
            "title": "Docs",
            "description": "Documentation",
            "icon": "book",
            "href": "https://example.org/docs",
        }
        item.update(overrides)
        return item

    def test_unknown_fields_allowed(self):
        document = [{"id": "a", "title": "A", "items": [self._item(color="red")], "x": 1}]

        assert COLLECTIONS[NAVIGATION].validate(document) == []

    def test_sub_categories_alias(self):
        document = [
            {
                "id": "a",
                "title": "A",
                "subCategories": [{"id": "b", "title": "B", "items": [self._item()]}],
            }
        ]

        assert COLLECTIONS[NAVIGATION].validate(document) == []

    @pytest.mark.parametrize(
        "overrides,field",
        [
            ({"href": "ftp://example.org"}, "href"),
            ({"title": "   "}, "title"),
            ({"title": "x" * 101}, "title"),
            ({"description": ""}, "description"),
        ],
    )
    def test_invalid_items(self, overrides, field):
        document = [{"id": "a", "title": "A", "items": [self._item(**overrides)]}]

        issues = COLLECTIONS[NAVIGATION].validate(document)

        assert issues
        assert issues[0].field.endswith(field)

    def test_duplicate_ids(self):
        document = [{"id": "a", "title": "A"}, {"id": "a", "title": "B"}]

        [issue] = COLLECTIONS[NAVIGATION].validate(document)

        assert issue.code == "DUPLICATE"
        assert '"a"' in issue.message


class TestSiteValidation:
    def test_theme_restricted(self):
        document = {
            "basic": {"title": "T", "description": "D"},
            "appearance": {"theme": "neon"},
        }

        [issue] = COLLECTIONS[SITE].validate(document)

        assert issue.field == "appearance.theme"

    def test_email_format(self):
        document = {
            "basic": {"title": "T", "description": "D", "email": "not-an-email"},
            "appearance": {},
        }

        [issue] = COLLECTIONS[SITE].validate(document)

        assert issue.field == "basic.email"
