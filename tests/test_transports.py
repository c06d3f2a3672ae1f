from __future__ import annotations

import asyncio
import json

import httpx

from adapters.pager_transport import PagerTransport
from adapters.telegram_bot_transport import TelegramBotTransport


class Recorder:
    def __init__(self, status_code: int = 200, text: str = "ok") -> None:
        self.status_code = status_code
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.text)


def test_pager_send_success_posts_destination_and_message() -> None:
    recorder = Recorder()
    transport = PagerTransport("https://pager.example/send", api_key="k", transport=httpx.MockTransport(recorder))

    result = asyncio.run(transport.send("5551234", "KBLM NOTAM\n#A1"))

    assert result.success
    request = recorder.requests[0]
    assert request.method == "POST"
    assert request.headers["Authorization"] == "Bearer k"
    assert json.loads(request.content) == {"to": "5551234", "message": "KBLM NOTAM\n#A1"}


def test_pager_truncates_to_character_limit() -> None:
    recorder = Recorder()
    transport = PagerTransport("https://pager.example/send", max_chars=240, transport=httpx.MockTransport(recorder))

    asyncio.run(transport.send("5551234", "x" * 500))

    assert len(json.loads(recorder.requests[0].content)["message"]) == 240


def test_pager_error_status_is_returned_not_raised() -> None:
    recorder = Recorder(status_code=429, text="slow down")
    transport = PagerTransport("https://pager.example/send", transport=httpx.MockTransport(recorder))

    result = asyncio.run(transport.send("5551234", "hello"))

    assert not result.success
    assert "429" in (result.error or "")


def test_pager_network_error_is_returned_not_raised() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    transport = PagerTransport("https://pager.example/send", transport=httpx.MockTransport(handler))

    result = asyncio.run(transport.send("5551234", "hello"))

    assert not result.success
    assert result.error


def test_telegram_bot_transport_hides_token_on_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError(f"cannot reach {request.url}", request=request)

    transport = TelegramBotTransport("123:SECRET", transport=httpx.MockTransport(handler))

    result = asyncio.run(transport.send("-100200", "hello"))

    assert not result.success
    assert "SECRET" not in (result.error or "")


def test_telegram_bot_transport_posts_chat_id() -> None:
    recorder = Recorder()
    transport = TelegramBotTransport("123:SECRET", transport=httpx.MockTransport(recorder))

    result = asyncio.run(transport.send("-100200", "hello"))

    assert result.success
    assert recorder.requests[0].url.path == "/bot123:SECRET/sendMessage"
    assert json.loads(recorder.requests[0].content)["chat_id"] == "-100200"
