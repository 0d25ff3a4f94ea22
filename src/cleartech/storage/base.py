"""
Case record repository contract
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from cleartech.config.settings import CASE_KEY_PREFIX
from cleartech.models.case_record import CaseRecord

class CaseRecordRepository(ABC):
    """
    Key-value persistence for case records, keyed by client id.

    ``load`` returns the raw stored JSON so the caller decides how to parse
    it. Every method raises StorageError on transport failure.
    """

    name = "base"

    def __init__(self, key_prefix: str = CASE_KEY_PREFIX):
        self.key_prefix = key_prefix

    def key_for(self, client_id: str) -> str:
        return f"{self.key_prefix}{client_id}"

    @abstractmethod
    async def load(self, client_id: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    async def store(self, client_id: str, record: CaseRecord) -> None:
        ...

    @abstractmethod
    async def delete(self, client_id: str) -> None:
        ...

    async def connect(self) -> None:
        """Open connections; no-op for stores without any"""

    async def close(self) -> None:
        """Release connections; no-op for stores without any"""
