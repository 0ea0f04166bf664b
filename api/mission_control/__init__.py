"""Mission Control - tasks and date-keyed news for an operations dashboard."""

from .aggregator import NewsAggregator
from .cache_store import NewsCacheStore
from .models import AggregatedNewsResponse, NewsItem
from .normalizer import normalize_results
from .task_store import TaskStore

__all__ = [
    "AggregatedNewsResponse",
    "NewsAggregator",
    "NewsCacheStore",
    "NewsItem",
    "TaskStore",
    "normalize_results",
]
