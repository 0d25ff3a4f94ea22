"""
Errors raised by the case state engine and its collaborators
"""

from typing import Dict, Optional

class CaseStateError(Exception):
    """Base error for case state operations"""

class ValidationError(CaseStateError):
    """Candidate record failed the validation gate; blocks persistence"""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__(f"Validation failed: {', '.join(self.errors) or 'unknown fields'}")

class StorageError(CaseStateError):
    """Load, store or delete against the case record store failed"""

    def __init__(self, message: str, client_id: Optional[str] = None):
        self.client_id = client_id
        super().__init__(message)

class MergeParseError(CaseStateError):
    """Stored record does not match the case record schema"""

    def __init__(self, client_id: str, errors: Dict[str, str]):
        self.client_id = client_id
        self.errors = dict(errors)
        super().__init__(f"Stored record for client {client_id} failed schema parse")

class SaveInProgressError(CaseStateError):
    """A save for the active client is still in flight"""

class DirectoryError(CaseStateError):
    """Client management platform request failed"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
