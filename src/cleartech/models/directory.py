"""
Client management platform models (clients, file channels, folders)
"""

import json
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from cleartech.models.enums import MembershipType

class DirectoryModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class ClientCustomFields(DirectoryModel):
    """Address and birth date kept as custom fields on the client profile"""
    street_address: Optional[str] = None
    street_address2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    birth_date: Optional[str] = None

class DirectoryClient(DirectoryModel):
    id: str
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    email: Optional[str] = None
    company_id: Optional[str] = None
    status: Optional[str] = None
    custom_fields: Optional[ClientCustomFields] = None

    @field_validator("custom_fields", mode="before")
    @classmethod
    def parse_custom_fields(cls, v):
        # The platform sometimes returns custom fields as a JSON string
        if isinstance(v, str):
            return json.loads(v) if v.strip() else None
        return v

    @property
    def display_name(self) -> str:
        return f"{self.given_name or ''} {self.family_name or ''}".strip()

class FileChannel(DirectoryModel):
    """File storage container; individual channels carry the owning client id"""
    id: Optional[str] = None
    membership_type: Optional[MembershipType] = None
    client_id: Optional[str] = None
    company_id: Optional[str] = None
    membership_entity_id: Optional[str] = None
    member_ids: List[str] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

class UpdateClientRequest(DirectoryModel):
    """
    Body for PATCH /clients/{id}.

    Only the named fields can be sent; ``custom_fields`` is the JSON-encoded
    ClientCustomFields the platform expects.
    """
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    custom_fields: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

class CreateFolderRequest(DirectoryModel):
    channel_id: str
    path: str

class FolderResponse(DirectoryModel):
    id: Optional[str] = None
    channel_id: Optional[str] = None
    path: Optional[str] = None
