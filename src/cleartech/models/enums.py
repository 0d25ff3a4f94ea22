"""
Enum definitions for the ClearTech case backend
"""

from enum import Enum

class FormType(str, Enum):
    """Case templates; each one has its own check catalog"""
    TENANT = "tenant"
    EMPLOYMENT = "employment"
    NONPROFIT = "nonprofit"

class CaseStatus(str, Enum):
    """
    Outcome of a background check case.

    - CLEARED: every check passed review
    - PENDING: default, review not finished
    - DENIED: the applicant was rejected
    """
    CLEARED = "cleared"
    PENDING = "pending"
    DENIED = "denied"

class MembershipType(str, Enum):
    INDIVIDUAL = "individual"
    COMPANY = "company"
