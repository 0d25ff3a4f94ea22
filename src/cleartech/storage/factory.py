"""
Build the configured case record repository
"""

import logging
from typing import Optional

from cleartech.config import settings
from cleartech.storage.base import CaseRecordRepository
from cleartech.storage.memory import InMemoryCaseRepository

logger = logging.getLogger(__name__)

# Global repository instance
_repository: Optional[CaseRecordRepository] = None

def build_case_repository(backend: Optional[str] = None) -> CaseRecordRepository:
    """Create a repository for ``backend`` (defaults to STORAGE_BACKEND)"""
    backend = (backend or settings.STORAGE_BACKEND).lower()

    if backend == "postgres":
        from cleartech.storage.postgres import PostgresCaseRepository
        if not settings.DATABASE_URL:
            raise ValueError("DATABASE_URL environment variable is required for postgres storage")
        return PostgresCaseRepository(settings.DATABASE_URL)

    if backend == "upstash":
        from cleartech.storage.upstash import UpstashCaseRepository
        if not settings.UPSTASH_REDIS_REST_URL or not settings.UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN are required for upstash storage")
        return UpstashCaseRepository(settings.UPSTASH_REDIS_REST_URL, settings.UPSTASH_REDIS_REST_TOKEN)

    if backend == "memory":
        logger.warning("Using in-memory case record storage - records are lost on restart")
        return InMemoryCaseRepository()

    raise ValueError(f"Unknown STORAGE_BACKEND: {backend}")

def get_case_repository() -> CaseRecordRepository:
    """Get the global case record repository instance"""
    global _repository
    if _repository is None:
        _repository = build_case_repository()
    return _repository

def set_case_repository(repository: Optional[CaseRecordRepository]) -> None:
    """Replace the global repository (app startup and tests)"""
    global _repository
    _repository = repository
