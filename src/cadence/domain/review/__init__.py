# Domain Review Package
from .models import (
    AggregateStatistics,
    DifficultyTier,
    PerformanceSample,
    PerformanceSummary,
    ReviewState,
)
from .ports import ReviewRepository

__all__ = [
    "AggregateStatistics",
    "DifficultyTier",
    "PerformanceSample",
    "PerformanceSummary",
    "ReviewState",
    "ReviewRepository",
]
