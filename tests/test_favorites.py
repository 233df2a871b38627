import unittest

from app.favorites import FAVORITES_KEY, FavoritesStore, LastSeenStore
from app.storage import InMemoryKeyValueStore


class TestFavoritesStore(unittest.TestCase):
    def setUp(self):
        self.kv = InMemoryKeyValueStore()
        self.favs = FavoritesStore(self.kv)

    def test_most_recent_first(self):
        self.favs.add("Oslo", 59.91, 10.75)
        self.favs.add("Rome", 41.9, 12.5)
        self.assertEqual([f.label for f in self.favs.list()], ["Rome", "Oslo"])

    def test_same_coordinates_keep_latest_label(self):
        self.favs.add("Home", 10.0, 20.0)
        self.favs.add("Other", 1.0, 2.0)
        entries = self.favs.add("My house", 10.0, 20.0)
        self.assertEqual(len(entries), 2)
        matching = [e for e in self.favs.list() if (e.lat, e.lon) == (10.0, 20.0)]
        self.assertEqual(len(matching), 1)
        self.assertEqual(matching[0].label, "My house")
        self.assertEqual(self.favs.list()[0].label, "My house")

    def test_capped_at_twelve(self):
        for i in range(20):
            self.favs.add(f"P{i}", float(i), float(i))
        entries = self.favs.list()
        self.assertEqual(len(entries), 12)
        self.assertEqual(entries[0].label, "P19")
        self.assertEqual(len(self.kv.get(FAVORITES_KEY)), 12)

    def test_remove_and_get(self):
        self.favs.add("A", 1.0, 1.0)
        self.favs.add("B", 2.0, 2.0)
        self.assertEqual(self.favs.get(1).label, "A")
        self.favs.remove(0)
        self.assertEqual([f.label for f in self.favs.list()], ["A"])
        with self.assertRaises(IndexError):
            self.favs.remove(5)
        with self.assertRaises(IndexError):
            self.favs.get(-1)

    def test_unreadable_entries_are_skipped(self):
        self.kv.set(FAVORITES_KEY, [{"label": "ok", "lat": 1, "lon": 2}, {"label": "bad"}, "junk"])
        self.assertEqual([f.label for f in self.favs.list()], ["ok"])
        self.kv.set(FAVORITES_KEY, {"not": "a list"})
        self.assertEqual(self.favs.list(), [])

    def test_display_label_falls_back_to_coordinates(self):
        entry = self.favs.add("", 1.234, 5.678)[0]
        self.assertEqual(entry.display_label, "1.23,5.68")


class TestLastSeenStore(unittest.TestCase):
    def test_round_trip(self):
        store = LastSeenStore(InMemoryKeyValueStore(), clock=lambda: 1700000000.5)
        store.save(48.8566, 2.3522, "Paris, Île-de-France, FR")
        loaded = store.load()
        self.assertEqual((loaded.lat, loaded.lon, loaded.label), (48.8566, 2.3522, "Paris, Île-de-France, FR"))
        self.assertEqual(loaded.saved_at_epoch_ms, 1700000000500)

    def test_overwritten_on_each_save(self):
        store = LastSeenStore(InMemoryKeyValueStore())
        store.save(1.0, 1.0, "first")
        store.save(2.0, 2.0, "second")
        self.assertEqual(store.load().label, "second")

    def test_missing_or_corrupt(self):
        kv = InMemoryKeyValueStore()
        store = LastSeenStore(kv)
        self.assertIsNone(store.load())
        kv.set("wt_last", {"label": "no coords"})
        self.assertIsNone(store.load())


if __name__ == "__main__":
    unittest.main()
