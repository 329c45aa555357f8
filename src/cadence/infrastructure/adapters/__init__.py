# Infrastructure Review Adapters Package
from .memory_store import InMemoryReviewRepository
from .yaml_store import YamlReviewRepository

__all__ = ["InMemoryReviewRepository", "YamlReviewRepository"]
