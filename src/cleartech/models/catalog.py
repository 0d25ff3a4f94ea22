"""
Background check catalog per form type
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from cleartech.models.enums import FormType

ACKNOWLEDGEMENT_OF_BACKGROUND_CHECK = "Acknowledgement of Background Check"
ACKNOWLEDGEMENT_OF_EMPLOYMENT = "Acknowledgement of Employment"
CRIMINAL_HISTORY_CLEARANCE = "Criminal History Clearance"
REFERENCE_CHECK_CLEARANCE = "Reference Check Clearance"
IDENTITY_VERIFICATION = "Identity Verification"

COMMON_CHECKS = (
    ACKNOWLEDGEMENT_OF_BACKGROUND_CHECK,
    ACKNOWLEDGEMENT_OF_EMPLOYMENT,
    CRIMINAL_HISTORY_CLEARANCE,
    REFERENCE_CHECK_CLEARANCE,
    IDENTITY_VERIFICATION,
)

@dataclass(frozen=True)
class FormTypeInfo:
    """Display and requirement details for one case template"""
    title: str
    description: str
    available_checks: Tuple[str, ...]
    required_checks: Tuple[str, ...]

FORM_TYPE_INFO: Dict[FormType, FormTypeInfo] = {
    FormType.TENANT: FormTypeInfo(
        title="Tenant Screening",
        description="Comprehensive background screening for rental applications",
        available_checks=COMMON_CHECKS + (
            "Rental Application Completion",
            "Home Visit Check Completion",
            "Personal Wellness Assessment",
            "Credit Check Assessment",
        ),
        required_checks=COMMON_CHECKS + ("Rental Application Completion",),
    ),
    FormType.EMPLOYMENT: FormTypeInfo(
        title="Employment Verification",
        description="Professional background verification for employment purposes",
        available_checks=COMMON_CHECKS + (
            "Employment Application Completion",
            "Personal Wellness Assessment",
        ),
        required_checks=COMMON_CHECKS + ("Employment Application Completion",),
    ),
    FormType.NONPROFIT: FormTypeInfo(
        title="Nonprofit Volunteer",
        description="Volunteer screening for nonprofit organizations",
        available_checks=COMMON_CHECKS + (
            "Sex Offender Clearance",
            "Youth Protection Policy",
            "Illinois State Murderer and Violent Offender Against Youth",
            "Illinois State Police Clearance",
            "FBI Clearance",
        ),
        required_checks=COMMON_CHECKS + (
            "Sex Offender Clearance",
            "Youth Protection Policy",
            "Illinois State Murderer and Violent Offender Against Youth",
            "Illinois State Police Clearance",
        ),
    ),
}

def form_type_info(form_type: FormType) -> FormTypeInfo:
    return FORM_TYPE_INFO[FormType(form_type)]

def available_checks(form_type: FormType) -> List[str]:
    return list(form_type_info(form_type).available_checks)

def required_checks(form_type: FormType) -> List[str]:
    return list(form_type_info(form_type).required_checks)

def missing_required_checks(form_type: FormType, selected: Iterable[str]) -> List[str]:
    """Required checks not yet selected, in catalog order"""
    chosen = set(selected)
    return [check for check in form_type_info(form_type).required_checks if check not in chosen]

def custom_checks(form_type: FormType, selected: Iterable[str]) -> List[str]:
    """Selected checks that are not part of the form type's predefined list"""
    predefined = set(form_type_info(form_type).available_checks)
    return [check for check in selected if check not in predefined]
