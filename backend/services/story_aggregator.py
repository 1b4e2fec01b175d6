"""
Story Aggregator - turns the flat Hacker News id feed into paginated, searchable pages
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from core.config import settings
from core.exceptions import UpstreamItemError, UpstreamUnavailableError
from services.content.hackernews_client import HackerNewsClient, Story
from services.story_cache import StoryCache

logger = logging.getLogger(__name__)


@dataclass
class PaginatedResult:
    """One page of stories plus the total used by the paginator"""
    items: List[Story] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = 10

    @classmethod
    def empty(cls, page: int, page_size: int) -> "PaginatedResult":
        return cls(items=[], total_count=0, page=page, page_size=page_size)


class StoryAggregator:
    """
    Builds pages over the newest-stories feed, fetching only what the cache lacks.

    Page N is always a slice of the cached id feed, never of cache contents.
    Without a search term the total is the feed length; with one it is the
    number of matching stories known so far, which is deliberately an
    approximation bounded by what has already been fetched.
    """

    def __init__(
        self,
        client: HackerNewsClient,
        cache: StoryCache,
        max_concurrent_fetches: Optional[int] = None,
    ):
        self.client = client
        self.cache = cache
        self.max_concurrent_fetches = max_concurrent_fetches or settings.max_concurrent_fetches
        self._executor = ThreadPoolExecutor(
            max_workers=self.max_concurrent_fetches,
            thread_name_prefix="hn-fetch",
        )
        self._inflight: Dict[int, asyncio.Future] = {}

    async def get_page(self, page: int, page_size: int, search: Optional[str] = None) -> PaginatedResult:
        """Return one page; page and page_size are assumed already validated."""
        id_feed = await self._get_id_feed()
        if not id_feed:
            return PaginatedResult.empty(page, page_size)

        skip = (page - 1) * page_size
        ids_to_fetch = list(id_feed[skip:skip + page_size])

        known = self.cache.get_known_stories(ids_to_fetch)
        unavailable = self.cache.get_unavailable_ids()
        missing_ids = [i for i in ids_to_fetch if i not in known and i not in unavailable]

        if missing_ids:
            fetched, dropped = await self._fetch_missing(missing_ids)
            self.cache.merge_stories(fetched)
            self.cache.mark_unavailable(dropped)
            logger.info(
                f"Page {page}: fetched {len(fetched)} of {len(missing_ids)} missing stories"
                f" ({len(dropped)} dropped)"
            )

        needle = search.lower() if search and search.strip() else ""
        if not needle:
            page_stories = self.cache.get_known_stories(ids_to_fetch)
            items = [page_stories[i] for i in ids_to_fetch if i in page_stories]
            return PaginatedResult(items=items, total_count=len(id_feed), page=page, page_size=page_size)

        # Search only covers stories already known, ordered as in the feed
        known_stories = self.cache.get_known_stories(id_feed)
        matches = [
            known_stories[i] for i in id_feed
            if i in known_stories and needle in known_stories[i].title.lower()
        ]
        return PaginatedResult(
            items=matches[skip:skip + page_size],
            total_count=len(matches),
            page=page,
            page_size=page_size,
        )

    async def _get_id_feed(self) -> Tuple[int, ...]:
        snapshot = self.cache.get_id_feed()
        if snapshot is not None:
            return snapshot.ids

        loop = asyncio.get_running_loop()
        try:
            ids = await loop.run_in_executor(self._executor, self.client.fetch_id_feed)
        except UpstreamUnavailableError as e:
            logger.warning(f"Id feed unavailable, serving empty page: {e.message}")
            return ()

        if not ids:
            logger.info("Upstream returned an empty id feed")
            return ()
        return self.cache.put_id_feed(ids).ids

    async def _fetch_missing(self, missing_ids: List[int]) -> Tuple[List[Story], List[int]]:
        """
        Fan out one fetch per id, sharing fetches already in flight.

        Shared fetches are shielded so cancelling one request leaves the
        others waiting on the same ids untouched. A fetch that was itself
        cancelled is left out of this page but not marked unavailable.
        """
        futures = [asyncio.shield(self._fetch_shared(story_id)) for story_id in missing_ids]
        results = await asyncio.gather(*futures, return_exceptions=True)

        fetched = []
        dropped = []
        for story_id, story in zip(missing_ids, results):
            if isinstance(story, asyncio.CancelledError):
                logger.debug(f"Fetch of story {story_id} was cancelled")
                continue
            if isinstance(story, BaseException):
                raise story
            if story is None or not story.url:
                dropped.append(story_id)
            else:
                fetched.append(story)
        return fetched, dropped

    def _fetch_shared(self, story_id: int) -> asyncio.Future:
        future = self._inflight.get(story_id)
        if future is None or future.get_loop() is not asyncio.get_running_loop():
            future = asyncio.ensure_future(self._fetch_one(story_id))
            self._inflight[story_id] = future
            future.add_done_callback(lambda done, sid=story_id: self._forget(sid, done))
        return future

    def _forget(self, story_id: int, future: asyncio.Future) -> None:
        if self._inflight.get(story_id) is future:
            del self._inflight[story_id]

    async def _fetch_one(self, story_id: int) -> Optional[Story]:
        loop = asyncio.get_running_loop()
        try:
            story = await loop.run_in_executor(self._executor, self.client.fetch_story, story_id)
        except UpstreamItemError as e:
            logger.warning(f"Dropping story {story_id}: {e.message}")
            return None

        if story is None:
            logger.debug(f"Story {story_id} not found upstream")
        elif not story.url:
            logger.debug(f"Story {story_id} has no url, skipping")
        return story

    def close(self) -> None:
        self._executor.shutdown(wait=False)
        self.client.close()
