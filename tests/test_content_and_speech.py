import asyncio
import json
from types import SimpleNamespace

import httpx
import pytest

from app.services.ai.chat_service import ChatService
from app.services.content.scraper import ContentFetcher, extract_visible_text
from app.services.tts.speech_service import SpeechService
from app.utils.exceptions import ContentFetchError, InvalidInputError, TTSError


ARTICLE_HTML = """
<html><head><title>Ignored</title><script>var x = 1;</script></head>
<body>
  <nav><a href="/">Home</a></nav>
  <h1>Release notes</h1>
  <p>The new parser is faster.</p>
  <ul><li>Fewer bugs</li></ul>
</body></html>
"""


def test_extract_visible_text_joins_content_elements() -> None:
    assert extract_visible_text(ARTICLE_HTML) == "Release notes The new parser is faster. Fewer bugs"


def test_extract_visible_text_falls_back_to_body() -> None:
    html = "<html><body><div>Just\n   a   div</div><span>and span</span></body></html>"
    assert extract_visible_text(html) == "Just a div and span"


def _fetcher(handler):
    return ContentFetcher(transport=httpx.MockTransport(handler))


def test_fetch_text_extracts_page() -> None:
    def handler(request):
        assert str(request.url) == "https://example.com/post"
        return httpx.Response(200, text=ARTICLE_HTML, headers={"content-type": "text/html"})

    text = asyncio.run(_fetcher(handler).fetch_text("https://example.com/post"))
    assert text.startswith("Release notes")


def test_fetch_text_rejects_error_status() -> None:
    fetcher = _fetcher(lambda request: httpx.Response(404, text="missing"))
    with pytest.raises(ContentFetchError) as exc:
        asyncio.run(fetcher.fetch_text("https://example.com/gone"))
    assert exc.value.details["status"] == 404
    assert exc.value.status_code == 400


def test_fetch_text_wraps_transport_errors() -> None:
    def handler(request):
        raise httpx.ConnectError("no route", request=request)

    with pytest.raises(ContentFetchError):
        asyncio.run(_fetcher(handler).fetch_text("https://unreachable.invalid"))


def test_fetch_text_rejects_empty_page() -> None:
    fetcher = _fetcher(lambda request: httpx.Response(200, text="<html><body>  </body></html>"))
    with pytest.raises(ContentFetchError):
        asyncio.run(fetcher.fetch_text("https://example.com/blank"))


def test_acquire_prefers_text_over_url() -> None:
    def handler(request):
        raise AssertionError("no fetch expected")

    text = asyncio.run(_fetcher(handler).acquire("Posted text.", "https://example.com"))
    assert text == "Posted text."


def test_acquire_fetches_url_when_text_blank() -> None:
    fetcher = _fetcher(lambda request: httpx.Response(200, text="<p>From the page.</p>"))
    assert asyncio.run(fetcher.acquire("   ", " https://example.com ")) == "From the page."


def test_acquire_requires_some_input() -> None:
    fetcher = _fetcher(lambda request: httpx.Response(200))
    with pytest.raises(InvalidInputError):
        asyncio.run(fetcher.acquire(None, ""))


def test_speech_service_posts_openai_style_payload() -> None:
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, content=b"ID3-mp3")

    service = SpeechService(
        "http://tts.local/v1/",
        model="kokoro",
        api_key="secret",
        speed=1.25,
        transport=httpx.MockTransport(handler),
    )
    audio = asyncio.run(service.synthesize("Hello there.", "am_adam"))

    assert audio == b"ID3-mp3"
    assert seen["url"] == "http://tts.local/v1/audio/speech"
    assert seen["auth"] == "Bearer secret"
    assert seen["body"] == {
        "model": "kokoro",
        "voice": "am_adam",
        "input": "Hello there.",
        "speed": 1.25,
        "response_format": "mp3",
    }


def test_speech_service_raises_tts_error_on_failure() -> None:
    service = SpeechService(
        "http://tts.local/v1",
        transport=httpx.MockTransport(lambda request: httpx.Response(500, text="boom")),
    )
    with pytest.raises(TTSError):
        asyncio.run(service.synthesize("Hello.", "af_bella"))


def test_speech_service_rejects_empty_audio() -> None:
    service = SpeechService(
        "http://tts.local/v1",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, content=b"")),
    )
    with pytest.raises(TTSError):
        asyncio.run(service.synthesize("Hello.", "af_bella"))


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.requests = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _chat(completions):
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return ChatService(model="test-model", client=client)


def test_chat_service_sends_system_and_user_messages() -> None:
    completions = FakeCompletions(content="  script text \n")
    result = asyncio.run(_chat(completions).generate_script("Source", "System prompt"))

    assert result == "script text"
    assert completions.requests[0]["model"] == "test-model"
    assert completions.requests[0]["messages"] == [
        {"role": "system", "content": "System prompt"},
        {"role": "user", "content": "Source"},
    ]


def test_chat_service_returns_empty_on_error_or_blank_reply() -> None:
    failing = _chat(FakeCompletions(error=RuntimeError("rate limited")))
    assert asyncio.run(failing.generate_script("Source", "System")) == ""
    assert asyncio.run(_chat(FakeCompletions(content=None)).generate_script("Source", "System")) == ""


def test_chat_service_requires_key_without_client() -> None:
    with pytest.raises(ValueError):
        ChatService(api_key="")
