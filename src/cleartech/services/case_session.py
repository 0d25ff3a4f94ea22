"""
Case session - sequences client selection, check edits and file uploads over the case state store
"""

import logging
from typing import Iterable, List, Optional, Union

from cleartech.models.case_record import FileEntry
from cleartech.models.catalog import missing_required_checks
from cleartech.models.directory import DirectoryClient, FileChannel
from cleartech.models.enums import FormType
from cleartech.services import checklist
from cleartech.services.case_state import CaseStateStore
from cleartech.services.client_profile import identification_from_client
from cleartech.services.directory_service import DirectoryService
from cleartech.services.errors import CaseStateError
from cleartech.services.file_channel_binder import bind_file_channel

logger = logging.getLogger(__name__)

class CaseSession:
    """
    One admin's working session.

    Client selection runs prefill -> load -> bind strictly in that order, and
    file uploads stay blocked until the new client's channel is bound, so an
    upload can never land in the previous client's channel.
    """

    def __init__(self, store: CaseStateStore, directory: Optional[DirectoryService] = None):
        self.store = store
        self.directory = directory
        self.channels: Optional[List[FileChannel]] = None
        self.client_changing = False
        self.pending_uploads: List[FileEntry] = []
        self._selection = 0

    async def select_client(
        self,
        client: Union[DirectoryClient, str, None],
        channels: Optional[Iterable[FileChannel]] = None,
    ) -> None:
        """
        Make ``client`` the active case.

        A DirectoryClient prefills identification before the stored record
        loads; the stored record's non-empty values still win on merge.
        """
        client_id = client.id if isinstance(client, DirectoryClient) else (client or "")

        self._selection += 1
        selection = self._selection
        self.client_changing = True
        self.pending_uploads = []
        if channels is not None:
            self.channels = list(channels)

        try:
            if isinstance(client, DirectoryClient):
                self.store.update({"identification": identification_from_client(client)})

            await self.store.activate(client_id)

            if selection != self._selection:
                logger.info(f"Client {client_id} was superseded before channel binding")
                return

            bind_file_channel(self.store, client_id, self.channels)
        finally:
            if selection == self._selection:
                self.client_changing = False

    def update_channels(self, channels: Iterable[FileChannel]) -> bool:
        """Channel directory arrived or changed; rebind the active client"""
        self.channels = list(channels)
        return bind_file_channel(self.store, self.store.client_id, self.channels)

    async def refresh_channels(self) -> bool:
        if self.directory is None:
            raise CaseStateError("No directory service configured")
        channels = await self.directory.list_file_channels()
        return self.update_channels(channels)

    def _apply(self, patch) -> bool:
        if patch is None:
            return False
        return self.store.update(patch)

    def toggle_check(self, check_name: str, checked: bool) -> bool:
        return self._apply(checklist.toggle_check(self.store.record, check_name, checked))

    def add_custom_check(self, check_name: str) -> bool:
        return self._apply(checklist.add_custom_check(self.store.record, check_name))

    def remove_check(self, check_name: str) -> bool:
        return self._apply(checklist.remove_check(self.store.record, check_name))

    def set_checks(self, check_names: Iterable[str]) -> bool:
        record = self.store.record
        return self._apply(
            checklist.reconcile_checks(record.background_checks, record.background_check_files, check_names)
        )

    def change_form_type(self, form_type: FormType) -> bool:
        return self._apply(checklist.change_form_type(self.store.record, form_type))

    def missing_required_checks(self) -> List[str]:
        record = self.store.record
        return missing_required_checks(record.form_type, record.background_checks)

    @property
    def uploads_allowed(self) -> bool:
        record = self.store.record
        return (
            not self.client_changing
            and not self.store.loading
            and bool(record.file_channel_id)
            and record.folder_created
        )

    def record_file_upload(self, check_name: str, file_name: str, file_id: str) -> bool:
        """Mark a check's file as uploaded once the file exists in the client's channel"""
        if not self.uploads_allowed:
            raise CaseStateError("File uploads are not available for the active client yet")

        entry = FileEntry(check_name=check_name, file_uploaded=True, file_name=file_name, file_id=file_id)
        changed = self.store.update_check_file_status(entry)
        if changed:
            self.pending_uploads.append(entry)
        return changed
