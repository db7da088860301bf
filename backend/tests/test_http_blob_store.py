"""
NoteBoard — HTTP Blob Store Tests
==================================

What:  Tests for HTTPBlobStore against a fake storage gateway.
How:   httpx.MockTransport routes PUT /objects/{key} and GET /objects/{key}/url
       to an in-memory dict.
"""

import httpx
import pytest

from noteboard.services.http_blob_store import HTTPBlobStore
from noteboard.services.store_base import Failure, FailureKind, Ok


class FakeGateway:
    def __init__(self):
        self.objects = {}
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "PUT" and path.startswith("/objects/"):
            self.objects[path[len("/objects/"):]] = request.content
            return httpx.Response(204)
        if request.method == "GET" and path.endswith("/url"):
            key = path[len("/objects/"):-len("/url")]
            if key not in self.objects:
                return httpx.Response(404, json={"message": "no such object"})
            return httpx.Response(200, json={"url": f"https://cdn.example.test/{key}?X-Sig=abc"})
        if path == "/health":
            return httpx.Response(200, json={"status": "ok"})
        return httpx.Response(404)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def store(gateway):
    return HTTPBlobStore(
        endpoint="https://storage.example.test/",
        api_key="k",
        timeout=5,
        transport=httpx.MockTransport(gateway),
    )


class TestHTTPBlobStore:

    @pytest.mark.asyncio
    async def test_put_then_get_original_key(self, store, gateway):
        assert await store.put("cat.png", b"meow") == Ok(None)

        result = await store.get("cat.png")

        assert result == Ok("https://cdn.example.test/cat.png?X-Sig=abc")
        assert gateway.objects["cat.png"] == b"meow"
        assert gateway.requests[0].headers["x-api-key"] == "k"

    @pytest.mark.asyncio
    async def test_get_missing_is_not_found(self, store):
        result = await store.get("dog.png")

        assert isinstance(result, Failure)
        assert result.kind is FailureKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_put_rejected_is_storage_failure(self):
        store = HTTPBlobStore(
            endpoint="https://storage.example.test",
            api_key="",
            transport=httpx.MockTransport(lambda request: httpx.Response(507)),
        )

        result = await store.put("cat.png", b"meow")

        assert isinstance(result, Failure)
        assert result.kind is FailureKind.STORAGE
        assert result.context["status"] == 507

    @pytest.mark.asyncio
    async def test_put_transport_error_is_storage_failure(self):
        def refuse(request):
            raise httpx.ConnectError("refused", request=request)

        store = HTTPBlobStore(endpoint="https://storage.example.test", transport=httpx.MockTransport(refuse))

        result = await store.put("cat.png", b"meow")

        assert isinstance(result, Failure)
        assert result.kind is FailureKind.STORAGE

    @pytest.mark.asyncio
    async def test_get_server_error_is_transient(self):
        store = HTTPBlobStore(
            endpoint="https://storage.example.test",
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        )

        result = await store.get("cat.png")

        assert isinstance(result, Failure)
        assert result.kind is FailureKind.TRANSIENT_NETWORK

    @pytest.mark.asyncio
    async def test_health_check(self, store):
        assert await store.health_check() is True
        await store.close()
