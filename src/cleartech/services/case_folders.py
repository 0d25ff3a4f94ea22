"""
Case folder service - creates the report folder in the client's file channel
"""

import logging

from cleartech.config import settings
from cleartech.models.catalog import form_type_info
from cleartech.models.directory import FolderResponse
from cleartech.models.enums import FormType
from cleartech.services.case_state import CaseStateStore
from cleartech.services.directory_service import DirectoryService
from cleartech.services.errors import CaseStateError

logger = logging.getLogger(__name__)

def folder_path(form_type: FormType) -> str:
    return f"{settings.REPORT_FOLDER_PREFIX} - {form_type_info(form_type).title}"

async def create_case_folder(store: CaseStateStore, directory: DirectoryService) -> FolderResponse:
    """
    Create the reports folder for the active case and record it on the case.

    ``folder_created`` is only set (and saved) after the directory confirms the
    folder; a DirectoryError leaves the case untouched.

    Raises:
        CaseStateError: no client is active or no file channel is bound
        DirectoryError: the folder could not be created
        ValidationError / StorageError: from saving the updated case
    """
    record = store.record
    if not store.client_id:
        raise CaseStateError("No client selected")
    if not record.file_channel_id:
        raise CaseStateError(
            "File channel not found. Check that a file channel exists for the client in the directory"
        )

    path = folder_path(record.form_type)
    folder = await directory.create_folder(record.file_channel_id, path)
    logger.info(f"Created folder '{path}' for client {store.client_id}")

    await store.save({"folder_created": True})
    return folder
