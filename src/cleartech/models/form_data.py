"""
Form-data API request/response models
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field

class FormDataSaveRequest(BaseModel):
    """
    Body for POST /api/form-data.

    Both fields are optional at the model level so a missing ``clientId`` is
    answered with the route's 400 rather than a request validation error.
    """
    model_config = ConfigDict(populate_by_name=True)

    client_id: Optional[str] = Field(None, alias="clientId")
    data: Any = None

class FormDataSaveResponse(BaseModel):
    success: bool = True

class FormDataErrorResponse(BaseModel):
    error: str
    details: Optional[Dict[str, Any]] = None
