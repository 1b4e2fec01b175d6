import logging
from datetime import datetime
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables from .env file
load_dotenv()

from core.config import settings
from core.exceptions import convert_to_http_exception
from models import ApplicationInfo
from routers.news import router as news_router
from services.content.hackernews_client import HackerNewsClient
from services.news_service import NewsService
from services.story_aggregator import StoryAggregator
from services.story_cache import StoryCache

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level), format=settings.log_format
)
logger = logging.getLogger(__name__)

# --- FastAPI App Setup ---
app = FastAPI(
    title=settings.app_name, version=settings.app_version, debug=settings.debug
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_credentials,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Build the single cache, upstream client and aggregator for this process"""
    try:
        app.state.story_cache = StoryCache(ttl_seconds=settings.cache_ttl_seconds)
        app.state.hackernews_client = HackerNewsClient(
            base_url=settings.hackernews_base_url, timeout=settings.request_timeout
        )
        app.state.story_aggregator = StoryAggregator(
            client=app.state.hackernews_client,
            cache=app.state.story_cache,
            max_concurrent_fetches=settings.max_concurrent_fetches,
        )
        app.state.news_service = NewsService(
            aggregator=app.state.story_aggregator,
            default_page_size=settings.default_page_size,
        )

        logger.info("All services initialized successfully")

    except Exception as e:
        logger.error(f"Failed to initialize services: {e}")
        http_exc = convert_to_http_exception(e)
        raise http_exc


@app.on_event("shutdown")
async def shutdown_event():
    """Release the upstream session and fetch workers"""
    try:
        if getattr(app.state, "news_service", None):
            app.state.news_service.close()

        logger.info("All services shut down successfully")

    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


# --- API Endpoints ---

# Include routers
app.include_router(news_router)


@app.get("/", response_model=ApplicationInfo)
def home():
    """Home endpoint with application information"""
    return {
        "message": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "environment": settings.environment,
        "features": [
            "Paginated newest Hacker News stories",
            "Case-insensitive title search",
            "Incremental story cache with TTL",
            "Concurrent upstream fetching",
        ],
    }


@app.get("/health")
def health_check():
    """Health check endpoint with service and cache status"""
    try:
        services = {}

        if getattr(app.state, "news_service", None):
            services["news_service"] = app.state.news_service.get_service_status()

        overall_status = "healthy" if services else "degraded"
        for service_name, service_status in services.items():
            if service_status.get("status") != "healthy":
                overall_status = "degraded"
                break

        return {
            "status": overall_status,
            "version": settings.app_version,
            "environment": settings.environment,
            "services": services,
            "timestamp": datetime.now().isoformat(),
        }

    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return {
            "status": "unhealthy",
            "error": str(e),
            "timestamp": datetime.now().isoformat(),
        }
