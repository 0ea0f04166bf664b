"""HTTP API for the Mission Control dashboard.

Endpoints:
- GET /api/tasks: task records from the static task file
- GET /api/news: date-keyed cached news (sample payload on any failure)
- GET /health: liveness probe

Run with the mission-control-api console script, or
``uvicorn --factory mission_control.api:create_app``.
"""

import logging
from contextlib import asynccontextmanager
from datetime import date as Date
from datetime import datetime, timezone

import uvicorn
from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .aggregator import NewsAggregator
from .cache_store import NewsCacheStore
from .config import Settings, get_settings
from .fallback import sample_news
from .handlers.base import BaseHandler
from .handlers.serpapi import SerpApiHandler
from .logging_config import configure_logging
from .models import TaskStoreError
from .task_store import TaskStore

logger = logging.getLogger(__name__)

TASKS_ERROR_MESSAGE = "Internal Server Error: Could not retrieve tasks."

router = APIRouter()


def parse_news_date(value: str | None) -> Date:
    """Parse a YYYY-MM-DD query value, defaulting to today (UTC).

    Raises:
        ValueError: If the value is not a valid calendar date
    """
    if value is None or not value.strip():
        return datetime.now(timezone.utc).date()
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


def parse_refresh_flag(value: str | None) -> bool:
    return (value or "").strip().lower() == "true"


@router.get("/api/tasks", tags=["Tasks"])
async def get_tasks(request: Request) -> JSONResponse:
    """Return the task records, or 500 when the task file is unusable."""
    task_store: TaskStore = request.app.state.task_store
    try:
        tasks = await task_store.list_tasks()
    except TaskStoreError:
        logger.exception("Failed to read task file %s", task_store.path)
        return JSONResponse(status_code=500, content={"error": TASKS_ERROR_MESSAGE})
    return JSONResponse(status_code=200, content=tasks)


@router.get("/api/news", tags=["News"])
async def get_news(
    request: Request,
    date: str | None = None,
    refresh: str | None = None,
) -> JSONResponse:
    """Return the news for a date.

    Always answers 200. Any failure (bad date, cache write error,
    unexpected pipeline error) is answered with the sample payload.
    """
    cache_store: NewsCacheStore = request.app.state.cache_store
    force_refresh = parse_refresh_flag(refresh)

    try:
        day = parse_news_date(date)
        response = await cache_store.get_news(day, force_refresh=force_refresh)
    except Exception:
        logger.exception("News request failed (date=%r); serving sample payload", date)
        response = sample_news()

    return JSONResponse(status_code=200, content=response.to_dict())


@router.get("/health", tags=["Health"])
async def health() -> dict:
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


def create_app(
    settings: Settings | None = None,
    handler: BaseHandler | None = None,
    cache_store: NewsCacheStore | None = None,
    task_store: TaskStore | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    The stores are owned by the application (app.state) for the
    lifetime of the process.

    Args:
        settings: Application settings (defaults to environment settings)
        handler: Upstream handler (defaults to SerpApiHandler)
        cache_store: News cache store (built from settings when omitted)
        task_store: Task store (built from settings when omitted)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    if cache_store is None:
        if handler is None:
            handler = SerpApiHandler(
                api_key=settings.serpapi_api_key,
                base_url=settings.serpapi_base_url,
                timeout=settings.upstream_timeout_seconds,
                num_results=settings.news_max_items,
            )
        aggregator = NewsAggregator(
            handler,
            queries=settings.bucket_queries,
            max_items=settings.news_max_items,
        )
        cache_store = NewsCacheStore(settings.news_cache_file, aggregator)

    if task_store is None:
        task_store = TaskStore(settings.tasks_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Mission Control API started (tasks=%s, cache=%s)",
            task_store.path,
            cache_store.path,
        )
        yield
        if handler is not None:
            await handler.close()

    app = FastAPI(
        title="Mission Control API",
        description="Tasks and date-keyed news for the Mission Control dashboard",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.cache_store = cache_store
    app.state.task_store = task_store
    app.include_router(router)

    return app


def main() -> None:
    """Run the API server with uvicorn."""
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
