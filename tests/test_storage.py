import unittest

from app.config import Settings
from app.errors import StorageError
from app.storage import InMemoryKeyValueStore, RedisKeyValueStore, build_store


class FakeRedis:
    def __init__(self):
        self.store = {}

    def set(self, key, value):
        self.store[key] = value

    def get(self, key):
        return self.store.get(key)

    def delete(self, key):
        self.store.pop(key, None)

    def scan_iter(self, pattern):
        prefix = pattern.rstrip("*")
        return [k for k in list(self.store.keys()) if k.startswith(prefix)]


class TestInMemoryKeyValueStore(unittest.TestCase):
    def test_round_trip_returns_copies(self):
        store = InMemoryKeyValueStore()
        value = [{"label": "Oslo", "lat": 59.9, "lon": 10.7}]
        store.set("k", value)
        fetched = store.get("k")
        self.assertEqual(fetched, value)
        fetched.append("mutated")
        self.assertEqual(len(store.get("k")), 1)

    def test_missing_delete_and_clear(self):
        store = InMemoryKeyValueStore()
        self.assertIsNone(store.get("nope"))
        store.set("a", 1)
        store.set("b", 2)
        store.delete("a")
        store.delete("a")
        self.assertIsNone(store.get("a"))
        store.clear()
        self.assertIsNone(store.get("b"))


class TestRedisKeyValueStore(unittest.TestCase):
    def test_round_trip_under_prefix(self):
        client = FakeRedis()
        store = RedisKeyValueStore(client, prefix="wx:")
        store.set("wt_last", {"lat": 1.5, "lon": 2.5, "label": "x", "t": 1})
        self.assertIn("wx:wt_last", client.store)
        self.assertEqual(store.get("wt_last")["lat"], 1.5)

    def test_write_failure_raises_storage_error(self):
        client = FakeRedis()

        def refuse(key, value):
            raise ConnectionError("redis down")

        client.set = refuse
        store = RedisKeyValueStore(client, prefix="wx:")
        with self.assertRaises(StorageError):
            store.set("wt_favs", [])

    def test_corrupt_value_reads_as_missing(self):
        client = FakeRedis()
        client.store["wx:bad"] = b"not-json"
        store = RedisKeyValueStore(client, prefix="wx:")
        self.assertIsNone(store.get("bad"))

    def test_clear_only_touches_prefix(self):
        client = FakeRedis()
        client.store["other:key"] = b"1"
        store = RedisKeyValueStore(client, prefix="wx:")
        store.set("a", 1)
        store.set("b", 2)
        store.clear()
        self.assertEqual(list(client.store), ["other:key"])


class TestBuildStore(unittest.TestCase):
    def test_memory_default(self):
        self.assertIsInstance(build_store(Settings(storage_backend="memory")), InMemoryKeyValueStore)

    def test_unknown_backend_raises(self):
        with self.assertRaises(ValueError):
            build_store(Settings(storage_backend="floppy"))

    def test_redis_requires_url(self):
        with self.assertRaises(ValueError):
            build_store(Settings(storage_backend="redis", storage_redis_url=None))


if __name__ == "__main__":
    unittest.main()
