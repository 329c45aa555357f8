"""
Review Service Factory
Centralizes the logic for selecting the repository adapter and wiring the engine.
"""

import logging

from cadence.application.config import AppConfig
from cadence.application.review.service import ReviewService
from cadence.application.review.scheduler import ReviewScheduler
from cadence.domain.review.ports import ReviewRepository
from cadence.infrastructure.adapters.memory_store import InMemoryReviewRepository
from cadence.infrastructure.adapters.yaml_store import YamlReviewRepository

logger = logging.getLogger(__name__)


def get_review_repository(config: AppConfig) -> ReviewRepository:
    """
    Returns the ReviewRepository implementation selected by config.backend.
    """
    if config.backend == "memory":
        return InMemoryReviewRepository()

    logger.debug("Using YAML review store at %s", config.store_path)
    return YamlReviewRepository(config.store_path)


def build_review_service(
    config: AppConfig, repo: ReviewRepository | None = None
) -> ReviewService:
    """
    Wire a ReviewService from config. The host application builds one and
    passes it to every call site.
    """
    return ReviewService(
        repo=repo or get_review_repository(config),
        scheduler=ReviewScheduler(initial_ease=config.initial_ease, min_ease=config.min_ease),
        performance_window=config.performance_window,
        max_queue_size=config.max_queue_size,
    )
