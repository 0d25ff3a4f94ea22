"""
Client management platform API - clients, file channels and folders
"""

import logging
from typing import Any, Dict, List, Optional
import httpx
from pydantic import ValidationError as PydanticValidationError

from cleartech.config import settings
from cleartech.models.directory import (
    CreateFolderRequest,
    DirectoryClient,
    FileChannel,
    FolderResponse,
    UpdateClientRequest,
)
from cleartech.services.errors import DirectoryError

logger = logging.getLogger(__name__)

class DirectoryService:
    """Async wrapper over the platform's REST endpoints"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_uri: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or settings.ASSEMBLY_API_KEY
        self.base_uri = (base_uri or settings.ASSEMBLY_BASE_URI).rstrip("/")
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self.transport = transport

        if not self.api_key:
            raise ValueError("ASSEMBLY_API_KEY is required for directory access")

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        headers = {"X-API-KEY": self.api_key}
        url = f"{self.base_uri}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.request(method, url, params=params, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Directory request {method} {path} failed: {e}")
            raise DirectoryError(f"Directory request failed: {e}") from e

        if response.status_code >= 400:
            logger.error(f"Directory request {method} {path} returned {response.status_code} - {response.text}")
            raise DirectoryError(
                f"Directory request failed: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise DirectoryError(f"Directory returned invalid JSON for {method} {path}") from e

    @staticmethod
    def _items(body: Any) -> List[Dict[str, Any]]:
        if isinstance(body, dict):
            return body.get("data") or []
        return body or []

    async def list_clients(self, limit: int = 2000) -> List[DirectoryClient]:
        body = await self._request("GET", "/clients", params={"limit": limit})
        try:
            clients = [DirectoryClient.model_validate(item) for item in self._items(body)]
        except PydanticValidationError as e:
            raise DirectoryError(f"Unexpected client payload: {e}") from e
        logger.info(f"Fetched {len(clients)} clients")
        return clients

    async def get_client(self, client_id: str) -> DirectoryClient:
        body = await self._request("GET", f"/clients/{client_id}")
        try:
            return DirectoryClient.model_validate(body)
        except PydanticValidationError as e:
            raise DirectoryError(f"Unexpected client payload: {e}") from e

    async def list_file_channels(self, limit: int = 2000) -> List[FileChannel]:
        body = await self._request("GET", "/channels/files", params={"limit": limit})
        try:
            channels = [FileChannel.model_validate(item) for item in self._items(body)]
        except PydanticValidationError as e:
            raise DirectoryError(f"Unexpected file channel payload: {e}") from e
        logger.info(f"Fetched {len(channels)} file channels")
        return channels

    async def update_client(self, client_id: str, request: UpdateClientRequest) -> DirectoryClient:
        payload = request.to_payload()
        if not payload:
            raise ValueError("No client fields provided to update")

        logger.info(f"Updating client profile {client_id}: {sorted(payload)}")
        body = await self._request("PATCH", f"/clients/{client_id}", json=payload)
        try:
            return DirectoryClient.model_validate(body)
        except PydanticValidationError as e:
            raise DirectoryError(f"Unexpected client payload: {e}") from e

    async def create_folder(self, channel_id: str, path: str) -> FolderResponse:
        request = CreateFolderRequest(channel_id=channel_id, path=path)
        logger.info(f"Creating folder '{path}' in channel {channel_id}")
        body = await self._request("POST", "/files/folder", json=request.model_dump(by_alias=True))
        return FolderResponse.model_validate(body if isinstance(body, dict) else {})
