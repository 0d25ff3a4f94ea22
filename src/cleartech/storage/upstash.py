"""
Upstash Redis case record store over the REST API
"""

import json
import logging
from typing import Any, Dict, List, Optional
import httpx

from cleartech.config.settings import HTTP_TIMEOUT_SECONDS
from cleartech.models.case_record import CaseRecord
from cleartech.services.errors import StorageError
from cleartech.storage.base import CaseRecordRepository

logger = logging.getLogger(__name__)

class UpstashCaseRepository(CaseRecordRepository):
    """
    Case records as JSON strings under ``form:<clientId>`` keys.

    Commands are posted as JSON arrays (``["SET", key, value]``) and the
    REST API answers ``{"result": ...}`` or ``{"error": ...}``.
    """

    name = "upstash"

    def __init__(
        self,
        rest_url: str,
        token: str,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs
    ):
        super().__init__(**kwargs)
        self.rest_url = rest_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.transport = transport

    async def _command(self, client_id: str, command: List[Any]) -> Any:
        headers = {"Authorization": f"Bearer {self.token}"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.rest_url, json=command, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Upstash {command[0]} failed for client {client_id}: {e}")
            raise StorageError(f"Case record store unreachable: {e}", client_id) from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"error": f"unexpected response {body!r}"}

        if response.status_code != 200 or "error" in body:
            detail = body.get("error") or response.text
            logger.error(f"Upstash {command[0]} rejected for client {client_id}: {response.status_code} - {detail}")
            raise StorageError(f"Case record store error: {detail}", client_id)

        return body.get("result")

    async def load(self, client_id: str) -> Optional[Dict[str, Any]]:
        result = await self._command(client_id, ["GET", self.key_for(client_id)])
        if result is None:
            return None
        if isinstance(result, str):
            try:
                return json.loads(result)
            except json.JSONDecodeError:
                logger.warning(f"Stored value for client {client_id} is not JSON")
                return result
        return result

    async def store(self, client_id: str, record: CaseRecord) -> None:
        await self._command(
            client_id,
            ["SET", self.key_for(client_id), json.dumps(record.to_storage())]
        )
        logger.info(f"Stored case record for client {client_id}")

    async def delete(self, client_id: str) -> None:
        await self._command(client_id, ["DEL", self.key_for(client_id)])
        logger.info(f"Deleted case record for client {client_id}")
