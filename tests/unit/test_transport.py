"""Unit tests for the HTTP chat transport using httpx.MockTransport."""

import json
from collections.abc import Callable

import httpx
import pytest
import pytest_check as check

from plantcare.chat.config import ClientConfig
from plantcare.chat.errors import (
    GENERIC_FAILURE_MESSAGE,
    SERVER_FAILURE_FALLBACK,
    ServerReportedError,
    TransportFailure,
)
from plantcare.chat.request import build_request
from plantcare.chat.transport import HttpChatTransport
from tests.conftest import make_image


def transport_for(
    handler: Callable[[httpx.Request], httpx.Response], config: ClientConfig
) -> HttpChatTransport:
    return HttpChatTransport(config, transport=httpx.MockTransport(handler))


class TestSend:
    """Tests for successful chat exchanges."""

    async def test_posts_multipart_in_order(self, client_config: ClientConfig) -> None:
        """Fields arrive as message, sessionId, then images."""
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={"message": "Hi", "sessionId": "abc"})

        payload = build_request("Help", "abc", [make_image("one.jpg"), make_image("two.jpg")])
        reply = await transport_for(handler, client_config).send(payload)

        request = captured[0]
        body = request.content.decode("latin-1")
        positions = [
            body.index('name="message"'),
            body.index('name="sessionId"'),
            body.index('filename="one.jpg"'),
            body.index('filename="two.jpg"'),
        ]
        check.equal(positions, sorted(positions))
        check.equal(request.method, "POST")
        check.equal(str(request.url), "http://test/api/ai-chat/message")
        check.is_true(request.headers["content-type"].startswith("multipart/form-data"))
        check.equal(reply.message, "Hi")
        check.equal(reply.session_id, "abc")

    async def test_text_only_request_is_multipart(self, client_config: ClientConfig) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={"message": "Hi", "sessionId": "abc"})

        await transport_for(handler, client_config).send(build_request("Help", "abc", []))

        request = captured[0]
        body = request.content.decode()
        check.is_true(request.headers["content-type"].startswith("multipart/form-data"))
        check.less(body.index('name="message"'), body.index('name="sessionId"'))
        check.is_not_in("filename=", body)

    async def test_reply_extra_fields(self, client_config: ClientConfig) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={"message": "Nice fern", "sessionId": "s", "hasImages": True, "imageCount": 2},
            )

        reply = await transport_for(handler, client_config).send(build_request("x", None, []))

        check.is_true(reply.has_images)
        check.equal(reply.image_count, 2)


class TestSendFailures:
    """Tests for mapping failures to chat errors."""

    async def test_server_error_text(self, client_config: ClientConfig) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "Only image files are allowed"})

        with pytest.raises(ServerReportedError) as exc_info:
            await transport_for(handler, client_config).send(build_request("x", None, []))

        check.equal(exc_info.value.message, "Only image files are allowed")
        check.equal(exc_info.value.status_code, 400)

    async def test_server_error_without_text(self, client_config: ClientConfig) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"detail": "boom"})

        with pytest.raises(ServerReportedError) as exc_info:
            await transport_for(handler, client_config).send(build_request("x", None, []))

        assert exc_info.value.message == SERVER_FAILURE_FALLBACK

    async def test_server_error_not_a_string(self, client_config: ClientConfig) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": {"code": "E42"}})

        with pytest.raises(ServerReportedError) as exc_info:
            await transport_for(handler, client_config).send(build_request("x", None, []))

        assert exc_info.value.message == SERVER_FAILURE_FALLBACK

    async def test_error_without_json_body(self, client_config: ClientConfig) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="<html>Bad Gateway</html>")

        with pytest.raises(TransportFailure) as exc_info:
            await transport_for(handler, client_config).send(build_request("x", None, []))

        assert exc_info.value.message == GENERIC_FAILURE_MESSAGE

    async def test_connection_error(self, client_config: ClientConfig) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        with pytest.raises(TransportFailure):
            await transport_for(handler, client_config).send(build_request("x", None, []))

    async def test_timeout(self, client_config: ClientConfig) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(TransportFailure):
            await transport_for(handler, client_config).send(build_request("x", None, []))

    async def test_malformed_success_body(self, client_config: ClientConfig) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=json.dumps({"sessionId": "s"}))

        with pytest.raises(TransportFailure):
            await transport_for(handler, client_config).send(build_request("x", None, []))


class TestClearSession:
    """Tests for forgetting a server session."""

    async def test_clear_session(self, client_config: ClientConfig) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={"message": "Chat session cleared successfully"})

        cleared = await transport_for(handler, client_config).clear_session("abc")

        check.is_true(cleared)
        check.equal(captured[0].method, "DELETE")
        check.equal(captured[0].url.path, "/api/ai-chat/session/abc")

    async def test_clear_unknown_session(self, client_config: ClientConfig) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"error": "Chat session not found"})

        assert await transport_for(handler, client_config).clear_session("nope") is False

    async def test_clear_session_offline(self, client_config: ClientConfig) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("offline", request=request)

        assert await transport_for(handler, client_config).clear_session("abc") is False
