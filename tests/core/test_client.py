"""Tests for the REST resource client."""

import asyncio
import json

import httpx
import pytest

from coursesphere.core.exceptions import ConflictError, ResourceError
from coursesphere.integrations.api import ResourceClient


def make_client(handler):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://api.test")
    return ResourceClient(base_url="http://api.test", client=http)


class TestResourceClient:
    def test_get_returns_json(self):
        """GET passes query params and returns the decoded body."""
        def handler(request):
            assert request.url.path == "/courses"
            assert request.url.params["creator_id"] == "1"
            return httpx.Response(200, json=[{"id": "1"}])

        result = asyncio.run(make_client(handler).get("/courses", params={"creator_id": "1"}))

        assert result == [{"id": "1"}]

    def test_put_sends_body(self):
        """PUT sends the body as JSON."""
        def handler(request):
            assert request.method == "PUT"
            return httpx.Response(200, json=json.loads(request.content))

        result = asyncio.run(make_client(handler).put("/courses/1", {"id": "1", "name": "x"}))

        assert result == {"id": "1", "name": "x"}

    @pytest.mark.parametrize("status_code", [400, 404, 500])
    def test_non_success_raises(self, status_code):
        """Non-success statuses raise ResourceError."""
        client = make_client(lambda request: httpx.Response(status_code, text="nope"))

        with pytest.raises(ResourceError) as exc:
            asyncio.run(client.delete("/lessons/1"))

        assert exc.value.status_code == status_code
        assert exc.value.method == "DELETE"
        assert not isinstance(exc.value, ConflictError)

    def test_conflict_raises_conflict_error(self):
        """A 409 raises ConflictError."""
        client = make_client(lambda request: httpx.Response(409, json={"detail": "stale"}))

        with pytest.raises(ConflictError):
            asyncio.run(client.put("/courses/1", {}))

    def test_transport_error_raises(self):
        """Transport failures raise ResourceError without a status."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ResourceError) as exc:
            asyncio.run(make_client(handler).get("/users"))

        assert exc.value.status_code is None

    def test_invalid_json_raises(self):
        """A success response that is not JSON raises ResourceError."""
        client = make_client(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(ResourceError):
            asyncio.run(client.get("/users"))

    def test_no_retries(self):
        """A failed request is sent once."""
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        with pytest.raises(ResourceError):
            asyncio.run(make_client(handler).post("/courses", {"name": "x"}))

        assert len(calls) == 1
