"""
Tests for the catalog query component
"""

from core.catalog import TAGS, CatalogQuery
from core.models import CatalogItem

from conftest import FakeBackend


class TestRequests:
    def test_changing_query_reissues_request(self, fake_backend):
        catalog = CatalogQuery(fake_backend)

        assert catalog.set_query("knight") is True
        assert fake_backend.list_calls == [("knight", "")]
        assert len(catalog.items) == 2

    def test_unchanged_query_does_not_refetch(self, fake_backend):
        catalog = CatalogQuery(fake_backend)
        catalog.set_query("knight")

        assert catalog.set_query("knight") is False
        assert len(fake_backend.list_calls) == 1

    def test_tag_toggle(self, fake_backend):
        catalog = CatalogQuery(fake_backend)

        catalog.select_tag("fantasy")
        assert catalog.active_tag == "fantasy"

        catalog.select_tag("fantasy")
        assert catalog.active_tag == ""

        catalog.select_tag("mech")
        catalog.select_tag("sci-fi")
        assert catalog.active_tag == "sci-fi"

        assert fake_backend.list_calls == [
            ("", "fantasy"),
            ("", ""),
            ("", "mech"),
            ("", "sci-fi"),
        ]

    def test_query_and_tag_are_combined(self, fake_backend):
        catalog = CatalogQuery(fake_backend)
        catalog.select_tag("PBR")
        catalog.set_query("orc")

        assert fake_backend.list_calls[-1] == ("orc", "PBR")

    def test_tags(self):
        assert TAGS == ("stylized", "fantasy", "sci-fi", "mech", "game-ready", "PBR")


class TestDisabledBackend:
    def test_unconfigured_backend_skips_query(self):
        backend = FakeBackend(items=[CatalogItem(id="x")], configured=False)
        catalog = CatalogQuery(backend)

        catalog.set_query("anything")
        catalog.select_tag("mech")

        assert backend.list_calls == []
        assert catalog.items == []
        assert catalog.last_error is None


class TestFailures:
    def test_failure_keeps_previous_list_and_records_error(self, fake_backend):
        catalog = CatalogQuery(fake_backend)
        catalog.refresh()
        shown = list(catalog.items)

        fake_backend.list_error = ValueError("bad json")
        assert catalog.set_query("new") is True

        assert catalog.items == shown
        assert isinstance(catalog.last_error, ValueError)

    def test_success_clears_recorded_error(self, fake_backend):
        catalog = CatalogQuery(fake_backend)
        fake_backend.list_error = ConnectionError("down")
        catalog.refresh()

        fake_backend.list_error = None
        catalog.refresh()

        assert catalog.last_error is None


class TestSuperseding:
    def test_stale_response_is_discarded(self, fake_backend, item_a, item_b):
        catalog = CatalogQuery(fake_backend)
        slow = catalog.begin_request()
        fast = catalog.begin_request()

        assert catalog.apply_response(fast, [item_b]) is True
        assert catalog.apply_response(slow, [item_a]) is False
        assert catalog.items == [item_b]

    def test_sequence_is_monotonic(self, fake_backend):
        catalog = CatalogQuery(fake_backend)
        catalog.refresh()
        catalog.refresh()

        assert catalog.latest_seq == 2

    def test_find_by_identifier(self, fake_backend, item_b):
        catalog = CatalogQuery(fake_backend)
        catalog.refresh()

        assert catalog.find("mongo-b") == item_b
        assert catalog.find("missing") is None
