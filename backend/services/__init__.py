"""
Services package initialization
"""

from .story_cache import StoryCache, IdFeedSnapshot
from .story_aggregator import StoryAggregator, PaginatedResult
from .news_service import NewsService

__all__ = [
    "StoryCache",
    "IdFeedSnapshot",
    "StoryAggregator",
    "PaginatedResult",
    "NewsService",
]
