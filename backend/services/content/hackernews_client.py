import logging
import requests
from dataclasses import dataclass
from typing import List, Optional

from core.config import settings
from core.exceptions import create_upstream_item_error, create_upstream_unavailable_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Story:
    """A Hacker News story as served by this backend"""
    id: int
    title: str
    url: str = ""


class HackerNewsClient:
    """
    Thin reader over the public Hacker News API.
    Only two calls: the newest story ids and a single item. No retries here;
    failures surface as UpstreamUnavailableError / UpstreamItemError.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or settings.hackernews_base_url).rstrip("/")
        self.timeout = timeout or settings.request_timeout
        self.session = session or requests.Session()

    def _get_json(self, path: str):
        response = self.session.get(f"{self.base_url}/{path}", timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def fetch_id_feed(self) -> List[int]:
        """
        Fetch the newest story ids, newest first.
        A null payload is an empty feed.
        """
        try:
            payload = self._get_json("newstories.json")
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Failed to fetch Hacker News id feed: {e}")
            raise create_upstream_unavailable_error(f"Hacker News id feed unavailable: {e}")

        if payload is None:
            return []
        if not isinstance(payload, list):
            raise create_upstream_unavailable_error(
                f"Unexpected id feed payload of type {type(payload).__name__}"
            )

        try:
            return [int(story_id) for story_id in payload]
        except (TypeError, ValueError) as e:
            raise create_upstream_unavailable_error(f"Malformed id in feed: {e}")

    def fetch_story(self, story_id: int) -> Optional[Story]:
        """
        Fetch one item. Returns None when the upstream has nothing for the id.
        """
        try:
            item = self._get_json(f"item/{story_id}.json")
        except (requests.RequestException, ValueError) as e:
            raise create_upstream_item_error(story_id, f"Failed to fetch story {story_id}: {e}")

        if item is None:
            return None
        if not isinstance(item, dict):
            raise create_upstream_item_error(story_id, f"Unexpected payload for story {story_id}")
        if item.get("deleted") or item.get("dead"):
            return None

        try:
            return Story(
                id=int(item.get("id", story_id)),
                title=str(item.get("title") or ""),
                url=str(item.get("url") or ""),
            )
        except (TypeError, ValueError) as e:
            raise create_upstream_item_error(story_id, f"Malformed story {story_id}: {e}")

    def close(self) -> None:
        self.session.close()
