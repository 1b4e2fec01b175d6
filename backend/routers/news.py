import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request

from core.exceptions import (
    NewsBaseException,
    convert_to_http_exception,
    create_service_unavailable_error,
)
from models import ErrorResponse, PaginatedStoriesResponse
from services.news_service import NewsService

router = APIRouter(prefix="/api/news", tags=["news"])
logger = logging.getLogger(__name__)


# --- Dependency Injection ---
def get_news_service(request: Request) -> NewsService:
    """Dependency to get the news service from application state."""
    if not getattr(request.app.state, "news_service", None):
        raise convert_to_http_exception(create_service_unavailable_error("News service"))
    return request.app.state.news_service


@router.get(
    "",
    response_model=PaginatedStoriesResponse,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def get_news(
    page: int = Query(1, description="1-based page number"),
    page_size: Optional[int] = Query(None, alias="pageSize", description="Stories per page"),
    search: Optional[str] = Query(None, description="Case-insensitive title filter"),
    news_service: NewsService = Depends(get_news_service),
):
    """
    Get the newest Hacker News stories, paginated and optionally filtered by title.

    Example:
    GET /api/news?page=2&pageSize=20&search=rust
    """
    try:
        result = await news_service.get_newest_stories(page, page_size, search)
    except NewsBaseException as e:
        logger.info(f"Rejected news request: {e.message}")
        raise convert_to_http_exception(e)

    return PaginatedStoriesResponse.from_result(result)
