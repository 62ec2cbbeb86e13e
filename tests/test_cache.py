import json

import pytest

from conftest import InMemoryRedis, run
from shared.cache import CacheClient, keys


@pytest.fixture
def store():
    return InMemoryRedis()


@pytest.fixture
def cache(store):
    client = CacheClient(url="redis://test", client=store)
    run(client.connect())
    return client


class TestCacheClient:

    def test_connect_marks_client_connected(self, cache):
        assert cache.enabled is True
        assert cache.connected is True

    def test_set_then_get_returns_original_value(self, cache):
        value = {"id": 7, "name": "Premium", "tags": ["gym", "pool"], "price": 7500.5}

        async def scenario():
            assert await cache.set("plan:7:detail", value, 60) is True
            return await cache.get("plan:7:detail")

        assert run(scenario()) == value

    def test_values_are_stored_as_json_text(self, cache, store):
        run(cache.set("k", [1, 2, 3], 30))
        assert json.loads(store.store["k"]) == [1, 2, 3]
        assert store.ttls["k"] == 30

    def test_zero_ttl_stores_without_expiry(self, cache, store):
        run(cache.set("forever", "x", 0))
        assert "forever" in store.store
        assert "forever" not in store.ttls

    def test_get_after_delete_returns_none(self, cache):
        async def scenario():
            await cache.set("user:1:profile", {"id": 1}, 60)
            assert await cache.delete("user:1:profile") is True
            return await cache.get("user:1:profile")

        assert run(scenario()) is None

    def test_miss_returns_none(self, cache):
        assert run(cache.get("nothing:here:yet")) is None

    def test_non_json_value_is_returned_raw(self, cache, store):
        store.store["legacy"] = "plain text"
        assert run(cache.get("legacy")) == "plain text"


class TestDegradedCache:

    def test_unconfigured_cache_is_a_noop(self):
        cache = CacheClient.from_url(None)

        async def scenario():
            assert await cache.connect() is False
            assert await cache.set("k", 1, 10) is False
            assert await cache.get("k") is None
            assert await cache.delete("k") is False
            assert await cache.ping() is False
            await cache.close()

        run(scenario())
        assert cache.enabled is False

    def test_store_down_at_startup_resumes_when_it_recovers(self, store):
        store.fail = True
        cache = CacheClient(url="redis://test", client=store)

        assert run(cache.connect()) is False
        assert cache.enabled is True
        assert cache.connected is False
        assert run(cache.set("k", 1, 10)) is False

        store.fail = False

        async def scenario():
            assert await cache.set("k", {"a": 1}, 10) is True
            assert await cache.get("k") == {"a": 1}
            assert await cache.delete("k") is True

        run(scenario())

    def test_failed_ping_does_not_block_invalidation(self, cache, store):
        run(cache.set("user:1:orders", [], 60))
        store.fail = True
        assert run(cache.ping()) is False
        store.fail = False

        assert run(cache.delete("user:1:orders")) is True
        assert "user:1:orders" not in store.store

    def test_store_failures_are_absorbed(self, cache, store):
        run(cache.set("k", {"a": 1}, 10))
        store.fail = True

        async def scenario():
            assert await cache.get("k") is None
            assert await cache.set("k", {"a": 2}, 10) is False
            assert await cache.delete("k") is False

        run(scenario())

    def test_ping_recovers_after_outage(self, cache, store):
        store.fail = True
        assert run(cache.ping()) is False
        store.fail = False
        assert run(cache.ping()) is True
        assert cache.connected is True


class TestCacheKeys:

    def test_key_layout(self):
        assert keys.cache_key("user", 42, "profile") == "user:42:profile"

    def test_resource_helpers(self):
        assert keys.user_profile_key(3) == "user:3:profile"
        assert keys.user_orders_key(3) == "user:3:orders"
        assert keys.user_subscriptions_key(3) == "user:3:subscriptions"
        assert keys.plans_key() == "plans:all:list"
        assert keys.contacts_latest_key() == "contacts:all:latest"
