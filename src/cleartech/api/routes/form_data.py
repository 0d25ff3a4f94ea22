"""
Form-data API routes - remote store for background check case records
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from cleartech.models.case_record import CaseRecord
from cleartech.models.form_data import FormDataErrorResponse, FormDataSaveRequest, FormDataSaveResponse
from cleartech.services.errors import StorageError
from cleartech.services.validation import validate
from cleartech.storage.base import CaseRecordRepository
from cleartech.storage.factory import get_case_repository

router = APIRouter()
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": FormDataErrorResponse},
    500: {"model": FormDataErrorResponse},
}

def _require_client_id(client_id: Optional[str]) -> str:
    if not client_id:
        raise HTTPException(status_code=400, detail={"error": "Missing clientId"})
    return client_id

@router.get("", responses=ERROR_RESPONSES)
async def get_form_data(
    client_id: Optional[str] = Query(None, alias="clientId"),
    repository: CaseRecordRepository = Depends(get_case_repository)
):
    """Stored case record for a client, or null"""
    client_id = _require_client_id(client_id)

    try:
        return await repository.load(client_id)
    except StorageError as e:
        logger.error(f"Error fetching form data for {client_id}: {e}")
        raise HTTPException(status_code=500, detail={"error": "Failed to fetch form data"})

@router.post("", response_model=FormDataSaveResponse, responses=ERROR_RESPONSES)
async def save_form_data(
    request: FormDataSaveRequest,
    repository: CaseRecordRepository = Depends(get_case_repository)
):
    """Validate and store a client's case record"""
    client_id = _require_client_id(request.client_id)

    result = validate(request.data)
    if not result.valid:
        logger.warning(f"Rejected form data for {client_id}: {result.errors}")
        raise HTTPException(
            status_code=400,
            detail={"error": "Invalid data", "details": {"errors": result.errors}}
        )

    record = CaseRecord.model_validate(request.data)
    try:
        await repository.store(client_id, record)
    except StorageError as e:
        logger.error(f"Error saving form data for {client_id}: {e}")
        raise HTTPException(status_code=500, detail={"error": "Failed to save form data"})

    return FormDataSaveResponse()

@router.delete("", response_model=FormDataSaveResponse, responses=ERROR_RESPONSES)
async def delete_form_data(
    client_id: Optional[str] = Query(None, alias="clientId"),
    repository: CaseRecordRepository = Depends(get_case_repository)
):
    client_id = _require_client_id(client_id)

    try:
        await repository.delete(client_id)
    except StorageError as e:
        logger.error(f"Error deleting form data for {client_id}: {e}")
        raise HTTPException(status_code=500, detail={"error": "Failed to delete form data"})

    return FormDataSaveResponse()
