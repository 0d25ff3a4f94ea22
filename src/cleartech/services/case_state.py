"""
Case state store - owns the live background check case record for the active client
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional, Union
from pydantic import ValidationError as PydanticValidationError

from cleartech.models.case_record import (
    CaseRecord,
    FileEntry,
    Identification,
    default_case_record,
    field_name_for,
)
from cleartech.services.errors import (
    CaseStateError,
    MergeParseError,
    SaveInProgressError,
    StorageError,
    ValidationError,
)
from cleartech.services.validation import field_errors, parse_stored, validate
from cleartech.storage.base import CaseRecordRepository

logger = logging.getLogger(__name__)

ChangeListener = Callable[[CaseRecord], None]

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

def merge_identification(stored: Identification, current: Identification) -> Identification:
    """Stored values win unless empty, in which case the in-memory value is kept"""
    return Identification(**{
        name: getattr(stored, name) or getattr(current, name)
        for name in Identification.model_fields
    })

class CaseStateStore:
    """
    Live case record for one admin session.

    Exposes ``record``, ``loading``, ``saving``, ``last_saved_at``, ``dirty``
    and ``errors`` alongside the mutation operations. Records are immutable:
    every effective change replaces ``record`` and notifies ``on_change``.
    """

    def __init__(
        self,
        repository: CaseRecordRepository,
        on_change: Optional[ChangeListener] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.repository = repository
        self.record: CaseRecord = default_case_record()
        self.loading = False
        self.saving = False
        self.last_saved_at: Optional[datetime] = None
        self.dirty = False
        self.errors: Dict[str, str] = {}

        self._on_change = on_change
        self._clock = clock
        self._client_id = ""
        self._activation = 0

    @property
    def client_id(self) -> str:
        """Client the store is currently scoped to ("" when none)"""
        return self._client_id

    def _replace(self, record: CaseRecord) -> None:
        self.record = record
        if self._on_change is not None:
            self._on_change(record)

    def _settle(self, record: CaseRecord, last_saved_at: Optional[datetime]) -> None:
        self._replace(record)
        self.dirty = False
        self.errors = {}
        self.loading = False
        self.last_saved_at = last_saved_at

    async def activate(self, client_id: str) -> None:
        """
        Scope the store to ``client_id`` and load its stored record.

        A stored record is merged into the in-memory one (identity fields keep
        their in-memory value when the stored value is empty). Without a stored
        record the case starts from defaults, keeping any prefilled
        identification. Responses for a superseded activation are discarded.

        Raises:
            StorageError: the store could not be read; the record is reset
        """
        self._activation += 1
        activation = self._activation
        self._client_id = client_id or ""

        if not client_id:
            self._settle(default_case_record(), None)
            return

        self.loading = True
        logger.info(f"Loading case record for client {client_id}")

        try:
            stored = await self.repository.load(client_id)
        except StorageError as e:
            if activation != self._activation:
                logger.info(f"Ignoring load failure for superseded client {client_id}: {e}")
                return
            logger.error(f"Failed to load case record for client {client_id}: {e}")
            self._settle(default_case_record(), None)
            raise

        if activation != self._activation:
            logger.info(f"Discarding stale case record load for client {client_id}")
            return

        current = self.record.identification
        prefill = current if current.is_populated() else None

        if stored is None:
            self._settle(default_case_record(client_id, prefill), None)
            logger.info(f"No saved case record for client {client_id}, starting from defaults")
            return

        # A stored record exists, so last_saved_at is set even when it fails to parse
        try:
            loaded = parse_stored(client_id, stored)
        except MergeParseError:
            logger.warning(f"Continuing with defaults for client {client_id}")
            self._settle(default_case_record(client_id, prefill), self._clock())
            return

        merged = loaded.model_copy(update={
            "identification": merge_identification(loaded.identification, current)
        })
        self._settle(merged, self._clock())
        logger.info(f"Loaded stored case record for client {client_id}")

    def _normalize(self, patch: Mapping[str, Any]) -> Dict[str, Any]:
        changes = {}
        for key, value in patch.items():
            name = field_name_for(key)
            if name is None:
                raise CaseStateError(f"Unknown case record field: {key}")
            changes[name] = value
        return changes

    def update(self, patch: Mapping[str, Any]) -> bool:
        """
        Shallow-merge ``patch`` into the record.

        Returns False and leaves everything untouched (record identity, dirty
        flag, listeners) when the merge would not change any field.
        """
        changes = self._normalize(patch)
        if not changes:
            return False

        try:
            return self._apply(changes)
        except PydanticValidationError as e:
            raise CaseStateError(f"Invalid case record update: {e}") from e

    def _apply(self, changes: Dict[str, Any]) -> bool:
        current = self.record
        candidate = CaseRecord.model_validate({**dict(current), **changes})

        if all(getattr(candidate, name) == getattr(current, name) for name in changes):
            logger.debug("No changes detected, skipping update")
            return False

        self._replace(candidate)
        self.dirty = True
        return True

    def update_identification(self, partial: Mapping[str, Any]) -> bool:
        fields = {}
        for key, value in partial.items():
            name = field_name_for(key, Identification)
            if name is None:
                raise CaseStateError(f"Unknown identification field: {key}")
            fields[name] = value
        return self.update({"identification": {**dict(self.record.identification), **fields}})

    def update_check_file_status(self, entry: Union[FileEntry, Mapping[str, Any]]) -> bool:
        """Record upload details for an existing check entry; unknown checks are ignored"""
        if not isinstance(entry, FileEntry):
            entry = FileEntry.model_validate(entry)

        files = list(self.record.background_check_files)
        for index, existing in enumerate(files):
            if existing.check_name == entry.check_name:
                files[index] = existing.model_copy(update={
                    "file_uploaded": entry.file_uploaded,
                    "file_name": entry.file_name,
                    "file_id": entry.file_id,
                })
                return self.update({"background_check_files": files})

        logger.info(f"No file entry for check '{entry.check_name}', status update ignored")
        return False

    async def save(self, overrides: Optional[Mapping[str, Any]] = None) -> None:
        """
        Validate and persist the record for the active client.

        Raises:
            CaseStateError: no client is active
            SaveInProgressError: a previous save has not finished
            ValidationError: the record failed validation; ``errors`` is populated
            StorageError: the store rejected the write; ``dirty`` is kept
        """
        client_id = self._client_id
        if not client_id:
            raise CaseStateError("No client selected")
        if self.saving:
            raise SaveInProgressError(f"Save already in progress for client {client_id}")

        errors = {}
        if overrides:
            try:
                self._apply(self._normalize(overrides))
            except PydanticValidationError as e:
                errors = field_errors(e)

        record = self.record
        if not errors:
            errors = validate(record).errors
        if errors:
            self.errors = errors
            logger.warning(f"Case record for client {client_id} failed validation: {errors}")
            raise ValidationError(errors)

        self.errors = {}
        self.saving = True
        activation = self._activation
        try:
            await self.repository.store(client_id, record)
        except StorageError as e:
            logger.error(f"Failed to save case record for client {client_id}: {e}")
            raise
        finally:
            self.saving = False

        if activation != self._activation:
            logger.info(f"Saved case record for client {client_id} after the active client changed")
            return

        self.last_saved_at = self._clock()
        # Edits made while the write was in flight are still unsaved
        if self.record is record:
            self.dirty = False
        logger.info(f"Saved case record for client {client_id}")

    async def reset(self) -> None:
        """
        Erase the active client's case, locally and in the store.

        Starts a new activation epoch, so a load still in flight is discarded
        and a save that completes afterwards leaves the metadata alone.

        Raises:
            SaveInProgressError: a save is still writing; its write would
                restore the erased record
            StorageError: the stored copy could not be deleted
        """
        client_id = self._client_id
        if not client_id:
            return
        if self.saving:
            raise SaveInProgressError(f"Save in progress for client {client_id}, reset refused")

        self._activation += 1
        self.loading = False
        self._replace(default_case_record())
        await self.repository.delete(client_id)
        self.dirty = False
        self.last_saved_at = None
        self.errors = {}
        logger.info(f"Reset case record for client {client_id}")
