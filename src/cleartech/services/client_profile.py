"""
Client profile service - identity prefill from the directory and profile write-back
"""

import json
import logging

from cleartech.models.case_record import Identification
from cleartech.models.directory import ClientCustomFields, DirectoryClient, UpdateClientRequest
from cleartech.services.case_state import CaseStateStore
from cleartech.services.directory_service import DirectoryService
from cleartech.services.errors import CaseStateError

logger = logging.getLogger(__name__)

def identification_from_client(client: DirectoryClient) -> Identification:
    """Applicant identity as held on the client's directory profile"""
    custom = client.custom_fields or ClientCustomFields()
    return Identification(
        first_name=client.given_name or "",
        last_name=client.family_name or "",
        street_address=custom.street_address or "",
        street_address2=custom.street_address2 or "",
        city=custom.city or "",
        state=custom.state or "",
        postal_code=custom.postal_code or "",
        birthdate=custom.birth_date or "",
    )

def build_update_request(identification: Identification) -> UpdateClientRequest:
    """Typed PATCH body carrying the applicant identity back to the directory"""
    custom = ClientCustomFields(
        street_address=identification.street_address,
        street_address2=identification.street_address2,
        city=identification.city,
        state=identification.state,
        postal_code=identification.postal_code,
        birth_date=identification.birthdate,
    )
    return UpdateClientRequest(
        given_name=identification.first_name or None,
        family_name=identification.last_name or None,
        custom_fields=json.dumps(custom.model_dump(by_alias=True, exclude_none=True)),
    )

async def sync_client_profile(store: CaseStateStore, directory: DirectoryService) -> DirectoryClient:
    """Push the active case's identification to the client's directory profile"""
    client_id = store.client_id
    if not client_id:
        raise CaseStateError("No client selected")

    request = build_update_request(store.record.identification)
    updated = await directory.update_client(client_id, request)
    logger.info(f"Synced client profile for {client_id}")
    return updated
