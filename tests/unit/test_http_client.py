import json

import httpx
import pytest

from club_console.clients.club_api_sdk import ApiError, ApplicationsClient, ContactsClient, HttpClient, MembersClient


class _Transport:
    def __init__(self, responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        result = self.responses[len(self.requests) - 1]
        if isinstance(result, Exception):
            raise result
        return result


def _client(transport: _Transport, **kwargs) -> HttpClient:
    async_client = httpx.AsyncClient(base_url="http://club.test", transport=httpx.MockTransport(transport))
    return HttpClient("http://club.test", retry_backoff_ms=0, client=async_client, **kwargs)


def _response(status_code: int, payload) -> httpx.Response:
    return httpx.Response(status_code=status_code, json=payload)


@pytest.mark.asyncio
async def test_get_is_retried_on_timeout_and_5xx() -> None:
    transport = _Transport(
        [
            httpx.ReadTimeout("timeout"),
            _response(503, {"message": "down"}),
            _response(200, {"ok": True}),
        ]
    )
    client = _client(transport, retry_max_attempts=3)

    payload = await client.request("GET", "/api/v1/apply")

    assert payload == {"ok": True}
    assert len(transport.requests) == 3


@pytest.mark.asyncio
async def test_no_retry_on_4xx() -> None:
    transport = _Transport([_response(403, {"message": "Admins only", "trace_id": "t-403"})])
    client = _client(transport, retry_max_attempts=3)

    with pytest.raises(ApiError) as info:
        await client.request("GET", "/api/v1/apply")

    assert info.value.code == "PERMISSION_DENIED"
    assert info.value.status_code == 403
    assert info.value.trace_id == "t-403"
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_mutations_are_never_retried() -> None:
    transport = _Transport([_response(503, {"message": "down"}), _response(200, {"ok": True})])
    client = _client(transport, retry_max_attempts=3)

    with pytest.raises(ApiError) as info:
        await client.request("PATCH", "/api/v1/apply/a1/status", json_body={"status": "approved"})

    assert info.value.status_code == 503
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_exhausted_transport_errors_surface_as_network_error() -> None:
    transport = _Transport([httpx.ConnectError("refused"), httpx.ConnectError("refused")])
    client = _client(transport, retry_max_attempts=2)

    with pytest.raises(ApiError) as info:
        await client.request("GET", "/api/v1/contact")

    assert info.value.code == "NETWORK_ERROR"
    assert len(transport.requests) == 2


@pytest.mark.asyncio
async def test_bearer_token_and_list_payload_wrapping() -> None:
    transport = _Transport([_response(200, [{"_id": "1"}])])
    client = _client(transport, access_token="tok")

    payload = await client.request("GET", "api/v1/members")

    assert payload == {"data": [{"_id": "1"}]}
    assert transport.requests[0].headers["Authorization"] == "Bearer tok"
    assert transport.requests[0].url.path == "/api/v1/members"


@pytest.mark.asyncio
async def test_applications_client_routes() -> None:
    transport = _Transport(
        [
            _response(200, {"data": {"docs": [{"_id": "a1"}], "totalDocs": 1, "totalPages": 1, "page": 1}}),
            _response(200, {"data": {"modifiedCount": 2}}),
            _response(200, {"success": True}),
            _response(200, {"data": {"application": {"_id": "a1", "seen": False}}}),
        ]
    )
    client = ApplicationsClient(_client(transport))

    listing = await client.list_page({"page": 1, "limit": 10, "search": "", "status": "pending"})
    bulk = await client.bulk_status(["a1", "a2"], "approved")
    await client.action("a1", "approve")
    detail = await client.detail("a1")

    list_request, bulk_request, approve_request, detail_request = transport.requests
    assert listing.rows[0]["id"] == "a1"
    assert dict(list_request.url.params) == {"page": "1", "limit": "10", "status": "pending"}
    assert (bulk_request.method, bulk_request.url.path) == ("PATCH", "/api/v1/apply/bulk/status")
    assert json.loads(bulk_request.content) == {"ids": ["a1", "a2"], "status": "approved"}
    assert bulk == {"modifiedCount": 2}
    assert (approve_request.method, approve_request.url.path) == ("PATCH", "/api/v1/apply/a1/status")
    assert json.loads(approve_request.content) == {"status": "approved"}
    assert detail_request.url.path == "/api/v1/apply/a1"
    assert detail == {"_id": "a1", "seen": False, "id": "a1"}


@pytest.mark.asyncio
async def test_contacts_and_members_routes() -> None:
    transport = _Transport([_response(200, {"success": True}), _response(200, {"success": True}), _response(200, {})])
    contacts = ContactsClient(_client(transport))
    members = MembersClient(_client(transport))

    await contacts.action("c1", "resolve")
    await members.remove("m1")
    await members.action("m1", "unban")

    resolve_request, remove_request, unban_request = transport.requests
    assert (resolve_request.method, resolve_request.url.path) == ("PATCH", "/api/v1/contact/c1/status")
    assert json.loads(resolve_request.content) == {"status": "resolved"}
    assert (remove_request.method, remove_request.url.path) == ("PUT", "/api/v1/members/m1/remove")
    assert (unban_request.method, unban_request.url.path) == ("PUT", "/api/v1/members/m1/unban")
    assert (await members.stats()).total == 0


@pytest.mark.asyncio
async def test_unknown_action_is_rejected_without_a_request() -> None:
    transport = _Transport([])
    contacts = ContactsClient(_client(transport))

    with pytest.raises(ApiError) as info:
        await contacts.action("c1", "approve")
    with pytest.raises(ApiError):
        await contacts.bulk_status(["c1"], "resolved")

    assert info.value.code == "UNSUPPORTED_ACTION"
    assert transport.requests == []
