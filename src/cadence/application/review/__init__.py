# Application Review Package
from .difficulty import DifficultyAdapter
from .scheduler import ReviewScheduler, quality_from_sample
from .service import ReviewService
from .statistics import StatisticsAggregator, summarize_performance

__all__ = [
    "DifficultyAdapter",
    "ReviewScheduler",
    "ReviewService",
    "StatisticsAggregator",
    "quality_from_sample",
    "summarize_performance",
]
