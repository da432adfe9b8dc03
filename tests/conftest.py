import os
import tempfile

# Settings are read at import time; keep test runs away from the working tree
_TMP_ROOT = tempfile.mkdtemp(prefix="confluencer-tests-")
os.environ["AUDIO_DIR"] = os.path.join(_TMP_ROOT, "audio")
os.environ["DATA_DIR"] = os.path.join(_TMP_ROOT, "data")
os.environ["STORAGE_BACKEND"] = "local"
os.environ["CHAT_API_KEY"] = ""
os.environ["FIREBASE_CREDENTIALS_PATH"] = ""
os.environ["PUBLIC_BASE_URL"] = "http://testserver"

import pytest
from fastapi.testclient import TestClient

from app.config import get_settings
from app.crud.story import StoryCRUD
from app.dependencies import Services, get_services
from app.main import app
from app.models.story import PublicUrlAudio, StorageKeyAudio
from app.services.ai.script_parser import RegexScriptParser
from app.services.content.scraper import ContentFetcher
from app.services.local_store import LocalStore
from app.services.storage.base import AudioStorage
from app.services.storage.resolver import AudioResolver
from app.services.tts.voice_service import Persona, PersonaRegistry
from app.utils.exceptions import StorageError, TTSError


def block(sentence, action=None):
    """One well-formed script block."""
    text = f'"sentence": "{sentence}"\n'
    if action is not None:
        text += f'"action": "{action}"\n'
    return text + "END_SENTENCE\n"


def script(*blocks):
    return "".join(blocks) + "END_SUMMARY"


class FakeChat:
    """Answers per persona, keyed on the 'Persona: <name>' line of the system prompt."""

    def __init__(self, responses=None, default=""):
        self.responses = responses or {}
        self.default = default
        self.calls = []

    async def generate_script(self, source_text, system_prompt):
        self.calls.append((source_text, system_prompt))
        for name, response in self.responses.items():
            if f"Persona: {name}" in system_prompt:
                return response
        return self.default


class FakeSpeech:
    def __init__(self, fail_on=None):
        self.fail_on = fail_on
        self.calls = []

    async def synthesize(self, text, voice):
        self.calls.append((text, voice))
        if text == self.fail_on:
            raise TTSError(details={"voice": voice})
        return f"{voice}:{text}".encode()


class FakeStorage(AudioStorage):
    """Stores bytes in memory; public mode returns URLs, private mode keys."""

    def __init__(self, public=False, fail_after=None):
        self.public = public
        self.fail_after = fail_after
        self.objects = {}
        self.sign_calls = []

    @property
    def name(self):
        return "fake"

    async def upload(self, data, filename):
        if self.fail_after is not None and len(self.objects) >= self.fail_after:
            raise StorageError(details={"backend": self.name, "key": filename})
        key = f"audio/{filename}"
        self.objects[key] = data
        if self.public:
            return PublicUrlAudio(url=f"https://cdn.example.com/{key}")
        return StorageKeyAudio(key=key)

    def signed_url(self, key, expires_in):
        self.sign_calls.append(key)
        return f"https://bucket.example.com/{key}?expires={expires_in}&n={len(self.sign_calls)}"


class FakeFetcher(ContentFetcher):
    def __init__(self, pages=None):
        super().__init__()
        self.pages = pages or {}
        self.fetched = []

    async def fetch_text(self, url):
        self.fetched.append(url)
        return self.pages[url]


def make_personas(*names, default=None):
    names = names or ("Brain", "Girl")
    voices = {"Brain": "am_santa", "Girl": "af_bella", "Financer": "am_adam"}
    return PersonaRegistry(
        [Persona(name=n, prompt=f"Persona: {n}", voice=voices.get(n, "af_bella")) for n in names],
        default=default or names[0],
    )


@pytest.fixture
def store(tmp_path):
    return LocalStore(str(tmp_path / "data"))


@pytest.fixture
def stories(store):
    return StoryCRUD(store)


@pytest.fixture
def fake_chat():
    return FakeChat()


@pytest.fixture
def fake_speech():
    return FakeSpeech()


@pytest.fixture
def fake_storage():
    return FakeStorage()


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture
def services(stories, fake_chat, fake_speech, fake_storage, fake_fetcher):
    return Services(
        settings=get_settings(),
        stories=stories,
        personas=make_personas(),
        storage=fake_storage,
        resolver=AudioResolver("http://testserver", signer=fake_storage, signed_url_ttl=600),
        fetcher=fake_fetcher,
        speech=fake_speech,
        parser=RegexScriptParser(),
        chat=fake_chat,
    )


@pytest.fixture
def client(services):
    app.dependency_overrides[get_services] = lambda: services
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
