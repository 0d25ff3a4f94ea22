"""
Validation gate - schema checks for case records before they are persisted
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, StrictBool, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from cleartech.models.case_record import CaseRecord
from cleartech.models.enums import CaseStatus, FormType
from cleartech.services.errors import MergeParseError

logger = logging.getLogger(__name__)

class _Schema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

def _required(value: str, message: str) -> str:
    if not value or not value.strip():
        raise PydanticCustomError("required", message)
    return value

class IdentificationSchema(_Schema):
    first_name: str
    last_name: str
    street_address: Optional[str] = None
    street_address2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    birthdate: Optional[str] = None

    @field_validator("first_name")
    @classmethod
    def validate_first_name(cls, v):
        return _required(v, "First name is required")

    @field_validator("last_name")
    @classmethod
    def validate_last_name(cls, v):
        return _required(v, "Last name is required")

class FileEntrySchema(_Schema):
    check_name: str
    file_uploaded: StrictBool
    file_name: Optional[str] = None
    file_id: Optional[str] = None

class CaseRecordSchema(_Schema):
    client: str
    form_type: FormType
    identification: IdentificationSchema
    background_checks: List[str]
    background_check_files: List[FileEntrySchema]
    status: CaseStatus
    memo: Optional[str] = None
    file_channel_id: Optional[str] = None
    folder_created: StrictBool = False

    @field_validator("client")
    @classmethod
    def validate_client(cls, v):
        return _required(v, "Client selection is required")

    @field_validator("background_checks")
    @classmethod
    def validate_background_checks(cls, v):
        if not v:
            raise PydanticCustomError("too_short", "At least one background check must be selected")
        return v

@dataclass
class ValidationResult:
    """Outcome of the validation gate"""
    valid: bool
    errors: Dict[str, str] = field(default_factory=dict)

def field_errors(exc: PydanticValidationError) -> Dict[str, str]:
    """Flatten pydantic errors to {dot.path: message}, first message per path wins"""
    errors: Dict[str, str] = {}
    for error in exc.errors():
        path = ".".join(str(part) for part in error.get("loc", ())) or "record"
        errors.setdefault(path, error.get("msg", "Invalid value"))
    return errors

def _payload(record: Union[CaseRecord, Dict[str, Any]]) -> Any:
    if isinstance(record, CaseRecord):
        return record.to_storage()
    return record

def validate(record: Union[CaseRecord, Dict[str, Any]]) -> ValidationResult:
    """
    Check a candidate case record against the case record schema.

    Args:
        record: CaseRecord instance or raw camelCase dict

    Returns:
        ValidationResult; ``errors`` maps dot-notation field paths
        (``identification.firstName``) to messages when invalid
    """
    try:
        CaseRecordSchema.model_validate(_payload(record))
    except PydanticValidationError as e:
        return ValidationResult(valid=False, errors=field_errors(e))
    return ValidationResult(valid=True)

def parse_stored(client_id: str, data: Any) -> CaseRecord:
    """Parse a stored record, raising MergeParseError when it fails the schema"""
    try:
        CaseRecordSchema.model_validate(data)
        return CaseRecord.model_validate(data)
    except PydanticValidationError as e:
        errors = field_errors(e)
        logger.warning(f"Stored record for client {client_id} failed schema parse: {errors}")
        raise MergeParseError(client_id, errors) from e

def format_errors(errors: Dict[str, str]) -> List[str]:
    """Banner lines, one "<fieldPath>: <message>" per error"""
    return [f"{path}: {message}" for path, message in errors.items()]
