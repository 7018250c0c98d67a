"""Repository classes for DynamoDB data access."""

from sitegen.repositories.base import BaseRepository
from sitegen.repositories.business import BusinessRepository
from sitegen.repositories.generation_job import GenerationJobRepository

__all__ = [
    "BaseRepository",
    "BusinessRepository",
    "GenerationJobRepository",
]
