import unittest
from dataclasses import replace

from pvgis import PvgisQuery, TTLCache, make_cache_key


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestTTLCache(unittest.TestCase):
    def test_hit_then_expiry(self):
        clock = FakeClock()
        c = TTLCache(60, clock=clock)
        c.set("k", 1)

        clock.now += 59
        self.assertEqual(1, c.get("k"))

        clock.now += 1
        self.assertIsNone(c.get("k"))
        self.assertEqual(0, len(c))

        st = c.stats()
        self.assertEqual(1, st["hits"])
        self.assertEqual(1, st["misses"])
        self.assertEqual(60.0, st["ttl_seconds"])

    def test_clear(self):
        c = TTLCache(60, clock=FakeClock())
        c.set("a", 1)
        c.set("b", 2)
        self.assertEqual(["a", "b"], c.stats()["keys"])
        c.clear()
        self.assertEqual(0, len(c))


    def test_set_purges_expired_entries(self):
        clock = FakeClock()
        c = TTLCache(10, clock=clock)
        for i in range(1000):
            c.set(f"k{i}", i)
            clock.now += 100
        self.assertEqual(1, len(c))
        self.assertEqual(1, c.purge())
        self.assertEqual(0, len(c))

    def test_oldest_evicted_beyond_max_entries(self):
        clock = FakeClock()
        c = TTLCache(3600, clock=clock, max_entries=2)
        for k in ("a", "b", "c"):
            c.set(k, k)
            clock.now += 1
        self.assertEqual(["b", "c"], c.stats()["keys"])
        self.assertIsNone(c.get("a"))

        c.set("b", "b2")
        c.set("d", "d")
        self.assertEqual(["b", "d"], c.stats()["keys"])


class TestCacheKey(unittest.TestCase):
    def test_fixed_precision(self):
        q = PvgisQuery(lat=24.71364, lon=46.67531, peakpower=21.6, loss=18.3, angle=22.0, aspect=0.0)
        self.assertEqual("24.7136|46.6753|21.60|18.3|22|0", make_cache_key(q))

    def test_small_changes_share_a_key(self):
        q = PvgisQuery(lat=24.71361, lon=46.6753, peakpower=21.6, loss=18.3, angle=22.2, aspect=0.0)
        self.assertEqual(make_cache_key(q), make_cache_key(replace(q, lat=24.71364, angle=21.9)))
        self.assertNotEqual(make_cache_key(q), make_cache_key(replace(q, peakpower=21.7)))


if __name__ == "__main__":
    unittest.main()
