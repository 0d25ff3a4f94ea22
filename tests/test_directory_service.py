"""
Directory service tests - platform API requests and error mapping
"""

import httpx
import pytest

from cleartech.models.directory import UpdateClientRequest
from cleartech.models.enums import MembershipType
from cleartech.services.directory_service import DirectoryService
from cleartech.services.errors import DirectoryError


class TestDirectoryService:

    def test_api_key_is_required(self, monkeypatch):
        monkeypatch.setattr("cleartech.config.settings.ASSEMBLY_API_KEY", None)

        with pytest.raises(ValueError):
            DirectoryService()

    @pytest.mark.asyncio
    async def test_list_clients(self, directory_stub, factory):
        directory_stub.respond("GET", "/clients", {"data": [
            factory.directory_client("c1"),
            factory.directory_client("c2", customFields='{"city": "Austin"}'),
        ]})

        clients = await directory_stub.service().list_clients()

        request = directory_stub.requests[0]
        assert request.headers["X-API-KEY"] == "test-key"
        assert request.url.params["limit"] == "2000"
        assert [client.id for client in clients] == ["c1", "c2"]
        assert clients[0].custom_fields.birth_date == "1990-04-12"
        assert clients[1].custom_fields.city == "Austin"

    @pytest.mark.asyncio
    async def test_list_file_channels(self, directory_stub):
        directory_stub.respond("GET", "/channels/files", {"data": [
            {"id": "ch-1", "membershipType": "individual", "clientId": "c1"},
            {"id": "ch-2", "membershipType": "company", "companyId": "co-1"},
        ]})

        channels = await directory_stub.service().list_file_channels()

        assert channels[0].client_id == "c1"
        assert channels[1].membership_type == MembershipType.COMPANY
        assert channels[1].client_id is None

    @pytest.mark.asyncio
    async def test_get_client(self, directory_stub, factory):
        directory_stub.respond("GET", "/clients/c1", factory.directory_client("c1", givenName="Alex"))

        client = await directory_stub.service().get_client("c1")

        assert client.given_name == "Alex"

    @pytest.mark.asyncio
    async def test_update_client_sends_only_set_fields(self, directory_stub):
        directory_stub.respond("PATCH", "/clients/c1", {"id": "c1", "givenName": "Alex"})

        await directory_stub.service().update_client(
            "c1", UpdateClientRequest(given_name="Alex", custom_fields='{"city": "Austin"}')
        )

        assert directory_stub.requests[0].method == "PATCH"
        assert directory_stub.body() == {"givenName": "Alex", "customFields": '{"city": "Austin"}'}

    @pytest.mark.asyncio
    async def test_empty_update_is_rejected(self, directory_stub):
        with pytest.raises(ValueError):
            await directory_stub.service().update_client("c1", UpdateClientRequest())

        assert directory_stub.requests == []

    @pytest.mark.asyncio
    async def test_error_status_maps_to_directory_error(self, directory_stub):
        directory_stub.respond("GET", "/clients/c9", {"message": "not found"}, status_code=404)

        with pytest.raises(DirectoryError) as exc_info:
            await directory_stub.service().get_client("c9")

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_transport_failure_maps_to_directory_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        service = DirectoryService(api_key="test-key", transport=httpx.MockTransport(handler))

        with pytest.raises(DirectoryError) as exc_info:
            await service.list_clients()

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_unexpected_payload_maps_to_directory_error(self, directory_stub):
        directory_stub.respond("GET", "/clients", {"data": [{"givenName": "No Id"}]})

        with pytest.raises(DirectoryError):
            await directory_stub.service().list_clients()
