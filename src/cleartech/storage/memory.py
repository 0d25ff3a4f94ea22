"""
In-process case record store for local development and tests
"""

import copy
import logging
from typing import Any, Dict, Optional

from cleartech.models.case_record import CaseRecord
from cleartech.storage.base import CaseRecordRepository

logger = logging.getLogger(__name__)

class InMemoryCaseRepository(CaseRecordRepository):
    """Dict-backed store; records are kept as their stored JSON form"""

    name = "memory"

    def __init__(self, initial: Optional[Dict[str, Dict[str, Any]]] = None, **kwargs):
        super().__init__(**kwargs)
        self._data: Dict[str, Dict[str, Any]] = {}
        for client_id, data in (initial or {}).items():
            self._data[self.key_for(client_id)] = copy.deepcopy(data)

    async def load(self, client_id: str) -> Optional[Dict[str, Any]]:
        data = self._data.get(self.key_for(client_id))
        return copy.deepcopy(data) if data is not None else None

    async def store(self, client_id: str, record: CaseRecord) -> None:
        self._data[self.key_for(client_id)] = record.to_storage()
        logger.info(f"Stored case record for client {client_id}")

    async def delete(self, client_id: str) -> None:
        self._data.pop(self.key_for(client_id), None)
        logger.info(f"Deleted case record for client {client_id}")

    def keys(self):
        return list(self._data)
