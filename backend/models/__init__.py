"""
Pydantic models for the Hacker News newest-stories backend
Provides data validation and serialization for responses
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field


# Base Models
class ErrorDetail(BaseModel):
    """Error body produced by core.exceptions.convert_to_http_exception"""
    error: str = Field(description="Error message")
    error_code: Optional[str] = Field(None, description="Error code")
    details: Optional[Dict[str, Any]] = Field(None, description="Error details")


class ErrorResponse(BaseModel):
    """Error response model"""
    detail: ErrorDetail = Field(description="Error body")


# Story Models
class StoryModel(BaseModel):
    """Single story in a page"""
    id: int = Field(description="Hacker News item id")
    title: str = Field(description="Story title")
    url: str = Field(description="Story link")


class PaginatedStoriesResponse(BaseModel):
    """Paginated newest stories, serialized with camelCase keys"""
    data: List[StoryModel] = Field(description="Stories on this page, newest first")
    total_count: int = Field(
        alias="totalCount",
        description="Feed size without search, matches among known stories with search",
    )
    current_page: int = Field(alias="currentPage", description="1-based page number")
    page_size: int = Field(alias="pageSize", description="Requested page size")

    @classmethod
    def from_result(cls, result) -> "PaginatedStoriesResponse":
        """Build the envelope from a services.story_aggregator.PaginatedResult"""
        return cls(
            data=[StoryModel(id=s.id, title=s.title, url=s.url) for s in result.items],
            totalCount=result.total_count,
            currentPage=result.page,
            pageSize=result.page_size,
        )


# Application Info Models
class ApplicationInfo(BaseModel):
    """Application information model"""
    message: str = Field(description="Application name")
    version: str = Field(description="Application version")
    status: str = Field(description="Application status")
    environment: str = Field(description="Environment")
    features: List[str] = Field(description="Available features")
