"""
Derived checklist reconciler tests - file entries always mirror the selected checks
"""

import pytest

from cleartech.models.case_record import CaseRecord, FileEntry
from cleartech.models.catalog import (
    CRIMINAL_HISTORY_CLEARANCE,
    IDENTITY_VERIFICATION,
    REFERENCE_CHECK_CLEARANCE,
    custom_checks,
    missing_required_checks,
)
from cleartech.models.enums import FormType
from cleartech.services.checklist import (
    add_custom_check,
    change_form_type,
    reconcile_checks,
    remove_check,
    toggle_check,
)


def _record(checks, files=None, **kwargs) -> CaseRecord:
    if files is None:
        files = [FileEntry(check_name=name) for name in checks]
    return CaseRecord(client="c1", background_checks=list(checks), background_check_files=files, **kwargs)


def _names(files):
    return [entry.check_name for entry in files]


class TestReconcileChecks:

    def test_same_selection_returns_identical_files(self):
        files = [
            FileEntry(check_name=CRIMINAL_HISTORY_CLEARANCE, file_uploaded=True, file_name="report.pdf", file_id="f1"),
            FileEntry(check_name=IDENTITY_VERIFICATION),
        ]
        checks = [CRIMINAL_HISTORY_CLEARANCE, IDENTITY_VERIFICATION]

        patch = reconcile_checks(checks, files, checks)

        assert patch["background_check_files"] == files
        assert patch["background_checks"] == checks

    def test_new_checks_are_appended_in_selection_order(self):
        patch = reconcile_checks(
            [IDENTITY_VERIFICATION],
            [FileEntry(check_name=IDENTITY_VERIFICATION)],
            [REFERENCE_CHECK_CLEARANCE, IDENTITY_VERIFICATION, CRIMINAL_HISTORY_CLEARANCE],
        )

        assert _names(patch["background_check_files"]) == [
            IDENTITY_VERIFICATION, REFERENCE_CHECK_CLEARANCE, CRIMINAL_HISTORY_CLEARANCE
        ]
        added = patch["background_check_files"][1]
        assert added == FileEntry(check_name=REFERENCE_CHECK_CLEARANCE, file_uploaded=False, file_name="", file_id="")

    def test_kept_entries_pass_through_with_upload_details(self):
        uploaded = FileEntry(check_name=CRIMINAL_HISTORY_CLEARANCE, file_uploaded=True, file_name="cr.pdf", file_id="f9")
        files = [FileEntry(check_name=IDENTITY_VERIFICATION), uploaded]

        patch = reconcile_checks(
            [IDENTITY_VERIFICATION, CRIMINAL_HISTORY_CLEARANCE], files, [CRIMINAL_HISTORY_CLEARANCE]
        )

        assert patch["background_check_files"] == [uploaded]
        assert patch["background_check_files"][0] is uploaded

    def test_duplicate_names_in_selection_collapse(self):
        patch = reconcile_checks([], [], [IDENTITY_VERIFICATION, IDENTITY_VERIFICATION])

        assert patch["background_checks"] == [IDENTITY_VERIFICATION]
        assert _names(patch["background_check_files"]) == [IDENTITY_VERIFICATION]

    @pytest.mark.parametrize("steps", [
        [["A"], ["A", "B"], ["B"], [], ["C", "A"]],
        [["A", "B", "C"], ["C", "B", "A"], ["B"], ["B", "b"]],
        [["Custom"], ["Custom", "custom"], ["custom"], ["custom", "Custom", "custom"]],
    ])
    def test_invariant_holds_after_every_step(self, steps):
        checks, files = [], []
        for new_checks in steps:
            patch = reconcile_checks(checks, files, new_checks)
            checks, files = patch["background_checks"], patch["background_check_files"]

            names = _names(files)
            assert set(names) == set(checks)
            assert len(names) == len(set(names))
            assert len(checks) == len(set(checks))


class TestChecklistHelpers:

    def test_toggle_on_adds_entry(self):
        record = _record([IDENTITY_VERIFICATION])

        patch = toggle_check(record, CRIMINAL_HISTORY_CLEARANCE, True)

        assert patch["background_checks"] == [IDENTITY_VERIFICATION, CRIMINAL_HISTORY_CLEARANCE]
        assert _names(patch["background_check_files"]) == [IDENTITY_VERIFICATION, CRIMINAL_HISTORY_CLEARANCE]

    def test_toggle_to_current_state_is_noop(self):
        record = _record([IDENTITY_VERIFICATION])

        assert toggle_check(record, IDENTITY_VERIFICATION, True) is None
        assert toggle_check(record, CRIMINAL_HISTORY_CLEARANCE, False) is None

    def test_remove_check_drops_entry(self):
        record = _record([IDENTITY_VERIFICATION, CRIMINAL_HISTORY_CLEARANCE])

        patch = remove_check(record, IDENTITY_VERIFICATION)

        assert patch["background_checks"] == [CRIMINAL_HISTORY_CLEARANCE]
        assert _names(patch["background_check_files"]) == [CRIMINAL_HISTORY_CLEARANCE]

    def test_custom_check_is_trimmed(self):
        record = _record([])

        patch = add_custom_check(record, "  Drug Screening  ")

        assert patch["background_checks"] == ["Drug Screening"]

    @pytest.mark.parametrize("name", ["", "   ", IDENTITY_VERIFICATION])
    def test_blank_or_existing_custom_check_is_ignored(self, name):
        record = _record([IDENTITY_VERIFICATION])

        assert add_custom_check(record, name) is None

    def test_custom_check_matching_is_case_sensitive(self):
        record = _record([IDENTITY_VERIFICATION])

        patch = add_custom_check(record, IDENTITY_VERIFICATION.lower())

        assert patch["background_checks"] == [IDENTITY_VERIFICATION, IDENTITY_VERIFICATION.lower()]

    def test_form_type_change_clears_checks(self):
        record = _record([IDENTITY_VERIFICATION], form_type=FormType.TENANT)

        patch = change_form_type(record, "nonprofit")

        assert patch == {
            "form_type": FormType.NONPROFIT,
            "background_checks": [],
            "background_check_files": [],
        }

    def test_same_form_type_is_noop(self):
        record = _record([IDENTITY_VERIFICATION], form_type=FormType.EMPLOYMENT)

        assert change_form_type(record, FormType.EMPLOYMENT) is None


class TestCatalog:

    def test_missing_required_checks_in_catalog_order(self):
        missing = missing_required_checks(FormType.EMPLOYMENT, [IDENTITY_VERIFICATION, CRIMINAL_HISTORY_CLEARANCE])

        assert missing == [
            "Acknowledgement of Background Check",
            "Acknowledgement of Employment",
            REFERENCE_CHECK_CLEARANCE,
            "Employment Application Completion",
        ]

    def test_fbi_clearance_is_optional_for_nonprofit(self):
        assert "FBI Clearance" not in missing_required_checks(FormType.NONPROFIT, [])

    def test_custom_checks_exclude_catalog_entries(self):
        selected = [IDENTITY_VERIFICATION, "Drug Screening", "Home Visit Check Completion"]

        assert custom_checks(FormType.EMPLOYMENT, selected) == ["Drug Screening", "Home Visit Check Completion"]
