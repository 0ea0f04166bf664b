"""Configuration for Mission Control.

This module provides configuration for the news provider, file locations,
and the HTTP server, read from environment variables (and a local .env file
for development).
"""

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from .models import BucketQuery


@dataclass
class Settings:
    """Application settings.

    Attributes:
        serpapi_api_key: SerpApi key sent as the api_key query parameter
        serpapi_base_url: SerpApi search endpoint
        tasks_file: Path of the static task file
        news_cache_file: Path of the persisted news cache snapshot
        news_max_items: Maximum items per news bucket
        upstream_timeout_seconds: Total timeout for each upstream call
        bucket_queries: Upstream query for each news bucket
        host: Server bind address
        port: Server port
        log_level: Logging level name
    """

    serpapi_api_key: str | None
    serpapi_base_url: str
    tasks_file: str
    news_cache_file: str
    news_max_items: int
    upstream_timeout_seconds: float
    bucket_queries: tuple[BucketQuery, ...]
    host: str
    port: int
    log_level: str


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def build_bucket_queries() -> tuple[BucketQuery, ...]:
    """Build the three bucket queries, honoring query overrides.

    Environment Variables:
        NEWS_QUERY_GLOBAL: Query for the global bucket
        NEWS_QUERY_TECH: Query for the local tech bucket
        NEWS_QUERY_AI: Query for the trending video bucket

    Returns:
        Tuple of BucketQuery in bucket order (global, tech, ai)
    """
    return (
        BucketQuery(
            bucket="global",
            query=os.getenv("NEWS_QUERY_GLOBAL") or DEFAULT_GLOBAL_QUERY,
            kind="general-news",
            categories=GLOBAL_CATEGORIES,
        ),
        BucketQuery(
            bucket="tech",
            query=os.getenv("NEWS_QUERY_TECH") or DEFAULT_TECH_QUERY,
            kind="general-news",
            categories=TECH_CATEGORIES,
        ),
        BucketQuery(
            bucket="ai",
            query=os.getenv("NEWS_QUERY_AI") or DEFAULT_AI_QUERY,
            kind="video",
            categories=AI_CATEGORIES,
        ),
    )


def get_settings() -> Settings:
    """Get application settings from environment variables.

    Environment Variables:
        SERPAPI_API_KEY: SerpApi key (required for live news)
        SERPAPI_BASE_URL: SerpApi endpoint override
        TASKS_FILE: Task file path
        NEWS_CACHE_FILE: News cache snapshot path
        NEWS_MAX_ITEMS: Per-bucket item cap
        UPSTREAM_TIMEOUT_SECONDS: Per-call upstream timeout
        HOST / PORT: Server bind address and port
        LOG_LEVEL: Logging level

    Returns:
        Settings instance
    """
    load_dotenv(find_dotenv(usecwd=True))

    return Settings(
        serpapi_api_key=os.getenv("SERPAPI_API_KEY") or None,
        serpapi_base_url=os.getenv("SERPAPI_BASE_URL", SERPAPI_BASE_URL),
        tasks_file=os.getenv("TASKS_FILE", DEFAULT_TASKS_FILE),
        news_cache_file=os.getenv("NEWS_CACHE_FILE", DEFAULT_NEWS_CACHE_FILE),
        news_max_items=_env_int("NEWS_MAX_ITEMS", MAX_ITEMS_PER_BUCKET),
        upstream_timeout_seconds=_env_float(
            "UPSTREAM_TIMEOUT_SECONDS", UPSTREAM_TIMEOUT_SECONDS
        ),
        bucket_queries=build_bucket_queries(),
        host=os.getenv("HOST", DEFAULT_HOST),
        port=_env_int("PORT", DEFAULT_PORT),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


# Provider
SERPAPI_BASE_URL = "https://serpapi.com/search.json"
UPSTREAM_TIMEOUT_SECONDS = 10.0

# Files (relative to the working directory)
DEFAULT_TASKS_FILE = "api/db.json"
DEFAULT_NEWS_CACHE_FILE = "api/news_cache.json"

# News buckets
MAX_ITEMS_PER_BUCKET = 10
DEFAULT_GLOBAL_QUERY = "world news"
DEFAULT_TECH_QUERY = "Malaysia technology news"
DEFAULT_AI_QUERY = "AI news"
GLOBAL_CATEGORIES = ("BREAKING", "POLITICS", "WORLD", "ECONOMY")
TECH_CATEGORIES = ("ECONOMY", "TECH")
AI_CATEGORIES = ("LIVE STREAM", "SYNTHETIC MEDIA", "AI")

# Server
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
