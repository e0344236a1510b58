"""Tests for ViewCache - path-keyed page cache with revalidation."""

from unittest.mock import Mock

import pytest
import redis

from clients.valkey_client import ValkeyClient
from invoicing.view_cache import INVOICES_PATH, ViewCache, _lineage


@pytest.fixture
def valkey_mock():
    mock = Mock(spec=ValkeyClient)
    mock.get_ints.return_value = [0, 0]
    return mock


@pytest.fixture
def cache(valkey_mock):
    return ViewCache(valkey_mock, ttl_seconds=60)


class TestLineage:

    def test_detail_path(self):
        assert _lineage("/dashboard/invoices/abc") == [
            "/dashboard",
            "/dashboard/invoices",
            "/dashboard/invoices/abc",
        ]

    def test_trailing_slash_ignored(self):
        assert _lineage("/dashboard/") == ["/dashboard"]


class TestGetPut:
    """Reads and writes."""

    def test_put_stores_payload_with_generation_and_ttl(self, cache, valkey_mock):
        cache.put(INVOICES_PATH, [{"id": "1"}], [0, 3])

        valkey_mock.set_json.assert_called_once_with(
            "view:/dashboard/invoices",
            {"generation": [0, 3], "payload": [{"id": "1"}]},
            expire_seconds=60,
        )

    def test_put_without_generation_is_skipped(self, cache, valkey_mock):
        cache.put(INVOICES_PATH, [], None)
        valkey_mock.set_json.assert_not_called()

    def test_generation_reads_path_and_ancestors(self, cache, valkey_mock):
        valkey_mock.get_ints.return_value = [1, 4]

        assert cache.generation(INVOICES_PATH) == [1, 4]
        valkey_mock.get_ints.assert_called_once_with(
            ["view:gen:/dashboard", "view:gen:/dashboard/invoices"]
        )

    def test_generation_unavailable(self, cache, valkey_mock):
        valkey_mock.get_ints.side_effect = redis.ConnectionError("down")
        assert cache.generation(INVOICES_PATH) is None

    def test_get_returns_current_payload(self, cache, valkey_mock):
        valkey_mock.get_json.return_value = {"generation": [0, 0], "payload": [{"id": "1"}]}

        assert cache.get(INVOICES_PATH) == [{"id": "1"}]
        valkey_mock.get_json.assert_called_once_with("view:/dashboard/invoices")

    def test_get_discards_entry_from_older_generation(self, cache, valkey_mock):
        valkey_mock.get_json.return_value = {"generation": [0, 0], "payload": [{"id": "1"}]}
        valkey_mock.get_ints.return_value = [0, 1]

        assert cache.get(INVOICES_PATH) is None

    def test_get_discards_entry_without_generation(self, cache, valkey_mock):
        valkey_mock.get_json.return_value = [{"id": "1"}]
        assert cache.get(INVOICES_PATH) is None

    def test_get_miss_returns_none(self, cache, valkey_mock):
        valkey_mock.get_json.return_value = None
        assert cache.get(INVOICES_PATH) is None

    def test_get_treats_cache_failure_as_miss(self, cache, valkey_mock):
        valkey_mock.get_json.side_effect = redis.ConnectionError("down")
        assert cache.get(INVOICES_PATH) is None

    def test_get_treats_corrupt_entry_as_miss(self, cache, valkey_mock):
        valkey_mock.get_json.side_effect = ValueError("Invalid JSON")
        assert cache.get(INVOICES_PATH) is None

    def test_put_failure_is_swallowed(self, cache, valkey_mock):
        valkey_mock.set_json.side_effect = redis.ConnectionError("down")
        cache.put(INVOICES_PATH, [], [0, 0])


class TestRevalidate:
    """Invalidation after mutations."""

    def test_bumps_generation_and_drops_path_and_nested_paths(self, cache, valkey_mock):
        valkey_mock.delete_matching.return_value = 2

        cache.revalidate(INVOICES_PATH)

        valkey_mock.incr.assert_called_once_with("view:gen:/dashboard/invoices")
        valkey_mock.delete.assert_called_once_with("view:/dashboard/invoices")
        valkey_mock.delete_matching.assert_called_once_with("view:/dashboard/invoices/*")

    def test_failure_does_not_raise(self, cache, valkey_mock):
        """A cache outage never fails the mutation that triggered revalidation."""
        valkey_mock.incr.side_effect = redis.ConnectionError("down")

        cache.revalidate(INVOICES_PATH)

        valkey_mock.delete.assert_not_called()


class TestInterleaving:
    """Reads and revalidations interleaved on one store."""

    def test_read_started_before_revalidation_is_not_served(self, memory_valkey):
        cache = ViewCache(memory_valkey)
        generation = cache.generation(INVOICES_PATH)

        cache.revalidate(INVOICES_PATH)
        cache.put(INVOICES_PATH, [{"status": "pending"}], generation)

        assert cache.get(INVOICES_PATH) is None

    def test_read_after_revalidation_is_served(self, memory_valkey):
        cache = ViewCache(memory_valkey)
        cache.revalidate(INVOICES_PATH)

        cache.put(INVOICES_PATH, [{"status": "paid"}], cache.generation(INVOICES_PATH))

        assert cache.get(INVOICES_PATH) == [{"status": "paid"}]

    def test_revalidating_list_invalidates_detail_read_in_flight(self, memory_valkey):
        cache = ViewCache(memory_valkey)
        path = f"{INVOICES_PATH}/a"
        generation = cache.generation(path)

        cache.revalidate(INVOICES_PATH)
        cache.put(path, {"id": "a"}, generation)

        assert cache.get(path) is None


class TestWithValkey:
    """Against a live Valkey (skipped without TEST_VALKEY_URL)."""

    def test_revalidate_clears_list_and_detail_pages(self, valkey):
        cache = ViewCache(valkey)
        for path, payload in [
            (INVOICES_PATH, [{"id": "a"}]),
            (f"{INVOICES_PATH}/a", {"id": "a"}),
            ("/dashboard/customers", {"other": True}),
        ]:
            cache.put(path, payload, cache.generation(path))

        cache.revalidate(INVOICES_PATH)

        assert cache.get(INVOICES_PATH) is None
        assert cache.get(f"{INVOICES_PATH}/a") is None
        assert cache.get("/dashboard/customers") == {"other": True}
        cache.revalidate("/dashboard/customers")

    def test_overlapping_read_is_not_served(self, valkey):
        cache = ViewCache(valkey)
        generation = cache.generation(INVOICES_PATH)

        cache.revalidate(INVOICES_PATH)
        cache.put(INVOICES_PATH, [{"id": "stale"}], generation)

        assert cache.get(INVOICES_PATH) is None
