"""
Unit tests for the story cache
Tests TTL expiry, first-write-wins merging and unavailable-id tracking
"""

import unittest
import os
import threading

# Add parent directory to path for imports
import sys
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.story_cache import StoryCache
from tests.fakes import FakeClock, make_story


class TestStoryCache(unittest.TestCase):
    """Test StoryCache with a controllable clock"""

    def setUp(self):
        self.clock = FakeClock()
        self.cache = StoryCache(ttl_seconds=600, clock=self.clock)

    def test_empty_cache_misses(self):
        """Test a new cache has no snapshot and no stories"""
        self.assertIsNone(self.cache.get_id_feed())
        self.assertEqual(self.cache.get_known_stories([1, 2]), {})

    def test_id_feed_round_trip_and_expiry(self):
        """Test the snapshot is served until older than the TTL"""
        self.cache.put_id_feed([3, 2, 1])

        self.clock.advance(600)
        snapshot = self.cache.get_id_feed()
        self.assertEqual(snapshot.ids, (3, 2, 1))
        self.assertEqual(snapshot.age(self.clock()), 600)

        self.clock.advance(1)
        self.assertIsNone(self.cache.get_id_feed())

    def test_put_id_feed_replaces_snapshot(self):
        """Test replacing the snapshot resets its timestamp"""
        self.cache.put_id_feed([1])
        self.clock.advance(500)
        self.cache.put_id_feed([2, 1])
        self.clock.advance(500)

        self.assertEqual(self.cache.get_id_feed().ids, (2, 1))

    def test_merge_first_write_wins(self):
        """Test merging never overwrites a live entry"""
        added = self.cache.merge_stories([make_story(1, "Original")])
        self.assertEqual(added, 1)

        added = self.cache.merge_stories([make_story(1, "Rewritten"), make_story(2)])
        self.assertEqual(added, 1)

        known = self.cache.get_known_stories([1, 2, 3])
        self.assertEqual(set(known), {1, 2})
        self.assertEqual(known[1].title, "Original")

    def test_stories_without_url_never_cached(self):
        """Test url-less stories are ignored by merge"""
        added = self.cache.merge_stories([make_story(9, "Ask HN", url="")])

        self.assertEqual(added, 0)
        self.assertEqual(self.cache.get_known_stories([9]), {})

    def test_story_presence_expires_per_lookup(self):
        """Test expired stories read as absent and can be merged again"""
        self.cache.merge_stories([make_story(1, "Old")])
        self.clock.advance(300)
        self.cache.merge_stories([make_story(2)])
        self.clock.advance(301)

        known = self.cache.get_known_stories([1, 2])
        self.assertEqual(set(known), {2})

        self.cache.merge_stories([make_story(1, "Refetched")])
        self.assertEqual(self.cache.get_known_stories([1])[1].title, "Refetched")

    def test_stories_outlive_feed_snapshot(self):
        """Test stories merged after the snapshot stay valid past its expiry"""
        self.cache.put_id_feed([1])
        self.clock.advance(500)
        self.cache.merge_stories([make_story(1)])
        self.clock.advance(200)

        self.assertIsNone(self.cache.get_id_feed())
        self.assertIn(1, self.cache.get_known_stories([1]))

    def test_expired_stories_evicted_across_feed_cycles(self):
        """Test the story map does not keep entries from past TTL windows"""
        for cycle in range(5):
            self.cache.put_id_feed(range(cycle * 100, cycle * 100 + 100))
            self.cache.merge_stories(
                [make_story(i) for i in range(cycle * 100, cycle * 100 + 100)]
            )
            self.clock.advance(601)

        self.assertIsNone(self.cache.get_id_feed())
        self.assertEqual(self.cache.story_ids(), [])

        self.cache.put_id_feed([1000])
        self.cache.merge_stories([make_story(1000)])
        self.assertEqual(self.cache.story_ids(), [1000])

    def test_put_id_feed_keeps_live_stories(self):
        """Test replacing the snapshot only evicts expired stories"""
        self.cache.merge_stories([make_story(1)])
        self.clock.advance(400)
        self.cache.merge_stories([make_story(2)])
        self.clock.advance(300)

        self.cache.put_id_feed([2, 1])

        self.assertEqual(self.cache.story_ids(), [2])

    def test_unavailable_ids_reset_with_snapshot(self):
        """Test unavailable ids are forgotten when a new snapshot arrives"""
        self.cache.put_id_feed([1, 2])
        self.cache.mark_unavailable([2])
        self.assertEqual(self.cache.get_unavailable_ids(), {2})

        self.cache.put_id_feed([3, 1, 2])
        self.assertEqual(self.cache.get_unavailable_ids(), set())

    def test_unavailable_ids_reset_on_snapshot_expiry(self):
        """Test an expired snapshot also clears unavailable ids"""
        self.cache.put_id_feed([1, 2])
        self.cache.mark_unavailable([2])
        self.clock.advance(601)

        self.assertIsNone(self.cache.get_id_feed())
        self.assertEqual(self.cache.get_unavailable_ids(), set())

    def test_concurrent_merges_keep_one_entry_per_id(self):
        """Test merges from many threads leave exactly one entry per id"""
        def worker(offset):
            self.cache.merge_stories(
                [make_story(i, f"writer {offset}") for i in range(100)]
            )

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        ids = self.cache.story_ids()
        self.assertEqual(len(ids), 100)
        self.assertEqual(len(set(ids)), 100)
        self.assertEqual(self.cache.stats()["known_stories"], 100)

    def test_stats_and_clear(self):
        """Test cache statistics and clearing"""
        self.cache.put_id_feed([1, 2, 3])
        self.cache.merge_stories([make_story(1)])
        self.cache.mark_unavailable([3])
        self.clock.advance(12)

        stats = self.cache.stats()
        self.assertEqual(stats["feed_size"], 3)
        self.assertEqual(stats["feed_age_seconds"], 12)
        self.assertEqual(stats["known_stories"], 1)
        self.assertEqual(stats["unavailable_ids"], 1)

        self.cache.clear()
        stats = self.cache.stats()
        self.assertEqual(stats["feed_size"], 0)
        self.assertIsNone(stats["feed_age_seconds"])
        self.assertEqual(stats["known_stories"], 0)


if __name__ == '__main__':
    unittest.main()
