"""
Derived checklist reconciler

Keeps ``background_check_files`` in step with ``background_checks``. Every
helper returns a patch for a single CaseStateStore.update() call, or None when
the user action changes nothing.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from cleartech.models.case_record import CaseRecord, FileEntry
from cleartech.models.enums import FormType

logger = logging.getLogger(__name__)

def _unique(names: Iterable[str]) -> List[str]:
    seen = set()
    ordered = []
    for name in names:
        if name not in seen:
            seen.add(name)
            ordered.append(name)
    return ordered

def reconcile_checks(
    current_checks: Iterable[str],
    current_files: Sequence[FileEntry],
    new_checks: Iterable[str],
) -> Dict[str, Any]:
    """
    Synchronize per-check file entries with a new selection of checks.

    Args:
        current_checks: checks selected before the user action
        current_files: file entries for those checks
        new_checks: checks selected after the user action, in selection order

    Returns:
        Patch with ``background_checks`` and ``background_check_files``.
        Entries of checks kept in the selection pass through untouched, new
        checks get an empty entry appended, dropped checks lose their entry.
    """
    current = set(current_checks)
    selected = _unique(new_checks)
    wanted = set(selected)

    # One entry per selected check; the first entry wins if duplicates crept in
    files = []
    tracked = set()
    for entry in current_files:
        if entry.check_name in wanted and entry.check_name not in tracked:
            files.append(entry)
            tracked.add(entry.check_name)

    added = [name for name in selected if name not in current]
    if added:
        logger.info(f"Adding file entries for checks: {added}")

    for name in selected:
        if name not in tracked:
            files.append(FileEntry(check_name=name, file_uploaded=False, file_name="", file_id=""))
            tracked.add(name)

    return {
        "background_checks": selected,
        "background_check_files": files,
    }

def toggle_check(record: CaseRecord, check_name: str, checked: bool) -> Optional[Dict[str, Any]]:
    """Patch for ticking or unticking a catalog check"""
    selected = check_name in record.background_checks
    if checked == selected:
        return None
    if checked:
        new_checks = record.background_checks + [check_name]
    else:
        new_checks = [name for name in record.background_checks if name != check_name]
    return reconcile_checks(record.background_checks, record.background_check_files, new_checks)

def add_custom_check(record: CaseRecord, check_name: str) -> Optional[Dict[str, Any]]:
    """Patch adding a free-text check; blank or already selected names are ignored"""
    name = (check_name or "").strip()
    if not name or name in record.background_checks:
        logger.info(f"Ignoring custom check '{name}': blank or already selected")
        return None
    return reconcile_checks(
        record.background_checks,
        record.background_check_files,
        record.background_checks + [name],
    )

def remove_check(record: CaseRecord, check_name: str) -> Optional[Dict[str, Any]]:
    return toggle_check(record, check_name, False)

def change_form_type(record: CaseRecord, form_type: FormType) -> Optional[Dict[str, Any]]:
    """Patch switching the case template; the check selection starts over"""
    form_type = FormType(form_type)
    if form_type == record.form_type:
        return None
    patch = reconcile_checks(record.background_checks, record.background_check_files, [])
    patch["form_type"] = form_type
    return patch
