"""
Background check case record models

Attributes are snake_case; the stored and wire JSON uses the camelCase aliases
(``formType``, ``backgroundCheckFiles`` ...), which is the format already held in
the key-value store.
"""

from typing import Any, Dict, List, Optional, Type
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cleartech.models.enums import CaseStatus, FormType

class CaseModel(BaseModel):
    """Immutable camelCase-aliased base for case data"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_storage(self) -> Dict[str, Any]:
        """JSON-ready dict using the stored (camelCase) field names"""
        return self.model_dump(mode="json", by_alias=True)

class Identification(CaseModel):
    first_name: str = ""
    last_name: str = ""
    street_address: Optional[str] = ""
    street_address2: Optional[str] = ""
    city: Optional[str] = ""
    state: Optional[str] = ""
    postal_code: Optional[str] = ""
    birthdate: Optional[str] = ""

    def is_populated(self) -> bool:
        """True when at least one identity field holds a value"""
        return any(self.model_dump().values())

class FileEntry(CaseModel):
    """File tracking for one selected check"""
    check_name: str
    file_uploaded: bool = False
    file_name: Optional[str] = ""
    file_id: Optional[str] = ""

class CaseRecord(CaseModel):
    client: str = ""
    form_type: FormType = FormType.TENANT
    identification: Identification = Field(default_factory=Identification)
    background_checks: List[str] = Field(default_factory=list)
    background_check_files: List[FileEntry] = Field(default_factory=list)
    status: CaseStatus = CaseStatus.PENDING
    memo: Optional[str] = ""
    file_channel_id: Optional[str] = None
    folder_created: bool = False

def default_case_record(client: str = "", identification: Optional[Identification] = None) -> CaseRecord:
    """Fresh record with every field at its default"""
    if identification is None:
        return CaseRecord(client=client)
    return CaseRecord(client=client, identification=identification)

def field_name_for(key: str, model: Type[BaseModel] = CaseRecord) -> Optional[str]:
    """Resolve an attribute name or camelCase alias of ``model`` to the attribute name"""
    if key in model.model_fields:
        return key
    for name, info in model.model_fields.items():
        if info.alias == key:
            return name
    return None
