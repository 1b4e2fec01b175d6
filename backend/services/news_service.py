"""
News Service - the single entry point for newest-stories queries
"""

import logging
from typing import Dict, Optional

from core.config import settings
from core.exceptions import create_validation_error
from services.content.hackernews_client import HackerNewsClient
from services.story_aggregator import PaginatedResult, StoryAggregator
from services.story_cache import StoryCache

logger = logging.getLogger(__name__)


class NewsService:
    """Validates page requests and delegates them to the story aggregator"""

    def __init__(
        self,
        aggregator: Optional[StoryAggregator] = None,
        default_page_size: Optional[int] = None,
    ):
        if aggregator is None:
            aggregator = StoryAggregator(client=HackerNewsClient(), cache=StoryCache())
        self.aggregator = aggregator
        self.default_page_size = default_page_size or settings.default_page_size
        logger.info(
            f"News service initialized (default page size {self.default_page_size}, "
            f"cache TTL {self.aggregator.cache.ttl}s)"
        )

    async def get_newest_stories(
        self,
        page: int = 1,
        page_size: Optional[int] = None,
        search: Optional[str] = None,
    ) -> PaginatedResult:
        """
        Get one page of the newest Hacker News stories

        Args:
            page: 1-based page number
            page_size: Stories per page, defaults to the configured page size
            search: Optional case-insensitive title filter

        Returns:
            PaginatedResult with the page items and total count

        Raises:
            ValidationError: If page or page_size is below 1
        """
        if page_size is None:
            page_size = self.default_page_size

        if page < 1 or page_size < 1:
            field = "page" if page < 1 else "pageSize"
            raise create_validation_error(
                "Page and page size must be greater than 0", field=field
            )

        return await self.aggregator.get_page(page, page_size, search)

    def get_service_status(self) -> Dict:
        """Get service status for health checks"""
        return {
            "status": "healthy",
            "default_page_size": self.default_page_size,
            "max_concurrent_fetches": self.aggregator.max_concurrent_fetches,
            "cache": self.aggregator.cache.stats(),
        }

    def close(self) -> None:
        self.aggregator.close()
