"""
pytest configuration and fixtures for the case state test suite
"""

import asyncio
import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from cleartech.models.case_record import CaseRecord
from cleartech.services.case_session import CaseSession
from cleartech.services.case_state import CaseStateStore
from cleartech.services.directory_service import DirectoryService
from cleartech.services.errors import StorageError
from cleartech.storage.memory import InMemoryCaseRepository
from data_factory import CaseDataFactory


class ControlledRepository(InMemoryCaseRepository):
    """In-memory store that records calls and can hold or fail operations"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls: List[Tuple[str, str]] = []
        self.failing: set = set()
        self._gates: Dict[Tuple[str, str], asyncio.Event] = {}

    def hold(self, operation: str, client_id: str) -> asyncio.Event:
        """Block ``operation`` for ``client_id`` until the returned event is set"""
        gate = asyncio.Event()
        self._gates[(operation, client_id)] = gate
        return gate

    async def _enter(self, operation: str, client_id: str):
        self.calls.append((operation, client_id))
        gate = self._gates.get((operation, client_id))
        if gate is not None:
            await gate.wait()
        if operation in self.failing:
            raise StorageError(f"{operation} failed", client_id)

    def count(self, operation: str) -> int:
        return sum(1 for op, _ in self.calls if op == operation)

    async def load(self, client_id: str):
        await self._enter("load", client_id)
        return await super().load(client_id)

    async def store(self, client_id: str, record: CaseRecord) -> None:
        await self._enter("store", client_id)
        await super().store(client_id, record)

    async def delete(self, client_id: str) -> None:
        await self._enter("delete", client_id)
        await super().delete(client_id)


class ChangeRecorder:
    """Collects records passed to the store's change listener"""

    def __init__(self):
        self.records: List[CaseRecord] = []

    def __call__(self, record: CaseRecord) -> None:
        self.records.append(record)


class DirectoryStub:
    """
    Mock transport handler for the platform API.

    Responses are registered per (method, path) with the base path stripped;
    unregistered routes answer 404.
    """

    BASE_URI = "https://directory.test/v1"

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._routes: Dict[Tuple[str, str], Tuple[int, Any]] = {}

    def respond(self, method: str, path: str, body: Any = None, status_code: int = 200) -> None:
        self._routes[(method, path)] = (status_code, body)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path[len("/v1"):]
        status_code, body = self._routes.get((request.method, path), (404, {"message": "Not found"}))
        return httpx.Response(status_code, json=body)

    def body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)

    def service(self) -> DirectoryService:
        return DirectoryService(
            api_key="test-key",
            base_uri=self.BASE_URI,
            transport=httpx.MockTransport(self),
        )


@pytest.fixture
def directory_stub() -> DirectoryStub:
    return DirectoryStub()


@pytest.fixture
def factory() -> CaseDataFactory:
    return CaseDataFactory()


@pytest.fixture
def repository() -> ControlledRepository:
    return ControlledRepository()


@pytest.fixture
def changes() -> ChangeRecorder:
    return ChangeRecorder()


@pytest.fixture
def store(repository, changes) -> CaseStateStore:
    return CaseStateStore(repository, on_change=changes)


@pytest.fixture
def session(store) -> CaseSession:
    return CaseSession(store)


@pytest.fixture
def directory_session(store, directory_stub) -> CaseSession:
    return CaseSession(store, directory_stub.service())
