"""
Story Cache - process-wide, time-bounded store of the id feed and fetched stories
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

from core.config import settings
from services.content.hackernews_client import Story

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IdFeedSnapshot:
    """The upstream newest-first ordering captured at one point in time"""
    ids: Tuple[int, ...]
    captured_at: float

    def age(self, now: float) -> float:
        return now - self.captured_at


class StoryCache:
    """
    Holds the last id feed snapshot and every story fetched so far.

    Expiry is lazy: each read compares the stored timestamp with the clock.
    An expired snapshot reads as a miss; an expired story reads as absent and
    is replaced by the next merge. Expired stories are evicted whenever the
    snapshot expires or is replaced. Story content never changes upstream, so
    for live entries the first write wins.

    Ids that could not be turned into a story (not found, fetch error, no url)
    are remembered until the snapshot is replaced.
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl_seconds or settings.cache_ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshot: Optional[IdFeedSnapshot] = None
        self._stories: Dict[int, Tuple[Story, float]] = {}
        self._unavailable: Set[int] = set()

    def _is_fresh(self, stored_at: float, now: float) -> bool:
        return now - stored_at <= self.ttl

    def _prune_expired(self, now: float) -> None:
        # caller holds the lock
        expired = [sid for sid, (_, stored_at) in self._stories.items() if not self._is_fresh(stored_at, now)]
        for story_id in expired:
            del self._stories[story_id]
        if expired:
            logger.debug(f"Evicted {len(expired)} expired stories")

    # -----------------------------
    # ID FEED
    # -----------------------------

    def get_id_feed(self) -> Optional[IdFeedSnapshot]:
        """Return the snapshot, or None when absent or older than the TTL."""
        now = self._clock()
        with self._lock:
            snapshot = self._snapshot
            if snapshot is None:
                return None
            if not self._is_fresh(snapshot.captured_at, now):
                logger.debug(f"Id feed snapshot expired after {snapshot.age(now):.0f}s")
                self._snapshot = None
                self._unavailable.clear()
                self._prune_expired(now)
                return None
            return snapshot

    def put_id_feed(self, ids: Iterable[int]) -> IdFeedSnapshot:
        """
        Replace the snapshot, forget ids marked unavailable under the old one
        and drop expired stories.
        """
        snapshot = IdFeedSnapshot(ids=tuple(ids), captured_at=self._clock())
        with self._lock:
            self._snapshot = snapshot
            self._unavailable.clear()
            self._prune_expired(snapshot.captured_at)
        logger.info(f"Cached id feed snapshot with {len(snapshot.ids)} ids")
        return snapshot

    # -----------------------------
    # STORIES
    # -----------------------------

    def get_known_stories(self, ids: Iterable[int]) -> Dict[int, Story]:
        """Return the subset of ids present in the cache and not expired."""
        now = self._clock()
        known = {}
        with self._lock:
            for story_id in ids:
                entry = self._stories.get(story_id)
                if entry is not None and self._is_fresh(entry[1], now):
                    known[story_id] = entry[0]
        return known

    def merge_stories(self, stories: Iterable[Story]) -> int:
        """
        Add stories in one locked step. Live entries are never overwritten,
        stories without a url are ignored. Returns the count actually added.
        """
        now = self._clock()
        added = 0
        with self._lock:
            for story in stories:
                if not story.url:
                    continue
                entry = self._stories.get(story.id)
                if entry is not None and self._is_fresh(entry[1], now):
                    continue
                self._stories[story.id] = (story, now)
                added += 1
        if added:
            logger.debug(f"Merged {added} stories into cache")
        return added

    def mark_unavailable(self, ids: Iterable[int]) -> None:
        with self._lock:
            self._unavailable.update(ids)

    def get_unavailable_ids(self) -> Set[int]:
        with self._lock:
            return set(self._unavailable)

    # -----------------------------
    # MAINTENANCE
    # -----------------------------

    def clear(self) -> None:
        with self._lock:
            self._snapshot = None
            self._stories.clear()
            self._unavailable.clear()

    def stats(self) -> Dict:
        now = self._clock()
        with self._lock:
            snapshot = self._snapshot
            live_stories = sum(
                1 for _, stored_at in self._stories.values() if self._is_fresh(stored_at, now)
            )
            return {
                "ttl_seconds": self.ttl,
                "feed_size": len(snapshot.ids) if snapshot else 0,
                "feed_age_seconds": round(snapshot.age(now), 1) if snapshot else None,
                "known_stories": live_stories,
                "unavailable_ids": len(self._unavailable),
            }

    def story_ids(self) -> List[int]:
        with self._lock:
            return list(self._stories)
