"""
Health check API route
"""

from datetime import datetime, timezone
from fastapi import APIRouter, Depends

from cleartech.storage.base import CaseRecordRepository
from cleartech.storage.factory import get_case_repository

router = APIRouter()

@router.get("/")
async def health_check(
    repository: CaseRecordRepository = Depends(get_case_repository)
):
    """
    Health check

    Probes the case record store with a read; a StorageError surfaces as a
    503 through the centralized error handlers.
    """
    await repository.load("__health__")

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "storage": repository.name
    }
