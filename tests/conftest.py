"""Pytest configuration and shared fixtures."""

import copy
import json
from unittest.mock import MagicMock, patch

import pytest

from wordbook.config import WordbookConfig
from wordbook.models import Attachment, Category, Text, Word
from wordbook.services import (
    ApiService,
    BundledDataService,
    CacheService,
    JsonFileStorage,
)

SAMPLE_CATEGORIES = [
    {"id": 1, "name": "Animais"},
    {"id": 2, "name": "Cores"},
]

SAMPLE_WORDS = {
    "1": [
        {"id": 10, "word": "gato", "meaning": "cat", "attachments": []},
        {"id": 11, "word": "cão", "meaning": "dog", "translation": "dog", "attachments": []},
    ],
    "2": [
        {
            "id": 20,
            "word": "azul",
            "meaning": "blue",
            "attachments": [{"id": 5, "source": "sky", "url": "https://cdn.example.com/sky.jpg"}],
        },
    ],
}

SAMPLE_TEXTS = [
    {
        "id": 1,
        "title": "Primeiro",
        "subtitle": "Um texto",
        "content": "Era uma vez...",
        "cover_url": "https://cdn.example.com/cover1.jpg",
    },
]


@pytest.fixture
def temp_dir(tmp_path):
    """Provide a temporary directory for test files."""
    return tmp_path


@pytest.fixture
def bundle_files(temp_dir):
    """Write small bundled datasets and return their paths."""
    words_path = temp_dir / "bundle" / "words.json"
    texts_path = temp_dir / "bundle" / "texts.json"
    words_path.parent.mkdir(parents=True)
    words_path.write_text(
        json.dumps(
            {
                "categories": [{"id": 9, "name": "Bundled"}],
                "words": {"9": [{"id": 90, "word": "livro", "meaning": "book"}]},
            }
        ),
        encoding="utf-8",
    )
    texts_path.write_text(
        json.dumps([{"id": 99, "title": "Bundled text", "subtitle": "", "content": "..."}]),
        encoding="utf-8",
    )
    return words_path, texts_path


@pytest.fixture
def test_config(temp_dir, bundle_files):
    """Provide a test configuration with temporary paths."""
    words_path, texts_path = bundle_files
    return WordbookConfig(
        api_base_url="http://api.test",
        request_timeout=2.0,
        storage_dir=temp_dir / "storage",
        bundled_words_path=words_path,
        bundled_texts_path=texts_path,
    )


@pytest.fixture
def storage(test_config):
    return JsonFileStorage(test_config.storage_dir)


@pytest.fixture
def cache(storage):
    return CacheService(storage)


@pytest.fixture
def bundled(test_config):
    return BundledDataService(test_config.bundled_words_path, test_config.bundled_texts_path)


@pytest.fixture
def api(test_config):
    """Provide an API client that already holds a token."""
    service = ApiService(test_config)
    service.set_auth_token("test-token")
    return service


@pytest.fixture
def categories_payload():
    return copy.deepcopy(SAMPLE_CATEGORIES)


@pytest.fixture
def words_payload():
    return copy.deepcopy(SAMPLE_WORDS)


@pytest.fixture
def texts_payload():
    return copy.deepcopy(SAMPLE_TEXTS)


@pytest.fixture
def make_response():
    """Factory fixture for fake ``requests`` responses."""

    def _make(status=200, payload=None, text="", reason=None):
        response = MagicMock()
        response.status_code = status
        response.reason = reason or ("OK" if status < 300 else "Error")
        response.text = text or (json.dumps(payload) if payload is not None else "")
        response.content = response.text.encode("utf-8")
        response.json.return_value = payload
        return response

    return _make


@pytest.fixture
def make_word():
    """Factory fixture for creating Word instances with sensible defaults."""

    def _make(
        id=1,
        word="gato",
        meaning="cat",
        category_id=1,
        translation=None,
        attachments=(),
    ):
        return Word(
            id=id,
            word=word,
            meaning=meaning,
            category_id=category_id,
            translation=translation,
            attachments=tuple(attachments),
        )

    return _make


@pytest.fixture
def sample_category():
    return Category(id=1, name="Animais")


@pytest.fixture
def sample_attachment():
    return Attachment(id=5, source="sky", url="https://cdn.example.com/sky.jpg")


@pytest.fixture
def sample_text():
    return Text(id=1, title="Primeiro", subtitle="Um texto", content="Era uma vez...")


class RecordingListener:
    """A real state listener that records every state it is given."""

    def __init__(self):
        self.states = []

    def __call__(self, state) -> None:
        self.states.append(state)


@pytest.fixture
def recording_listener():
    """Provide a listener that records all notifications for assertion."""
    return RecordingListener()


class FakeBackend:
    """Routes fake HTTP calls by (method, path) and records them.

    A route value may be a response, or an exception instance to raise
    (e.g. ``requests.exceptions.ConnectionError()``).
    """

    def __init__(self, make_response):
        self._make_response = make_response
        self.routes = {}
        self.calls = []

    def route(self, method, path, status=200, payload=None):
        self.routes[(method, path)] = self._make_response(status=status, payload=payload)

    def fail(self, method, path, exc):
        self.routes[(method, path)] = exc

    def calls_to(self, method, path):
        return [call for call in self.calls if call[0] == method and call[1] == path]

    def __call__(self, method, url, **kwargs):
        path = url.split("http://api.test", 1)[1]
        self.calls.append((method, path, kwargs))
        result = self.routes.get((method, path))
        if isinstance(result, Exception):
            raise result
        if result is None:
            return self._make_response(status=404, text="not found")
        return result


@pytest.fixture
def fake_backend(make_response):
    """Patch requests so every API call is answered by a FakeBackend."""
    backend = FakeBackend(make_response)
    with patch("wordbook.services.api_service.requests.request", side_effect=backend):
        yield backend


@pytest.fixture
def online_backend(fake_backend):
    """FakeBackend serving the sample categories, words and texts."""
    fake_backend.route("GET", "/category/all", payload={"categories": SAMPLE_CATEGORIES})
    fake_backend.route("GET", "/word/all", payload={"data": SAMPLE_WORDS})
    fake_backend.route("GET", "/text/all", payload={"data": SAMPLE_TEXTS})
    return fake_backend
