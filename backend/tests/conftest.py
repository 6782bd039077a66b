"""
Shared test fixtures and configuration.
"""

import json
import os
import tempfile

import pytest

# Set test environment variables before importing app modules
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOCAL_STORAGE_PATH", os.path.join(tempfile.gettempdir(), "maintlog_test_data"))
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("LLM_API_KEY", "")

from fastapi.testclient import TestClient

from maintlog.api.deps import get_storage, get_llm_provider
from maintlog.llm.base import LLMProvider, LLMResponse
from maintlog.main import app
from maintlog.storage import LocalStorage, ChatStorage
from maintlog.utils.auth import create_access_token


def reply_json(message, symptom=None, cause=None, solution=None,
               is_complete=None, missing_fields=None):
    """Raw model output honouring the extraction contract."""
    values = {"symptom": symptom, "cause": cause, "solution": solution}
    missing = [name for name, value in values.items() if not value]
    return json.dumps({
        "message": message,
        "extractedInfo": {
            **values,
            "isComplete": (not missing) if is_complete is None else is_complete,
            "missingFields": missing if missing_fields is None else missing_fields,
        },
    })


class FakeLLMProvider(LLMProvider):
    """Provider returning queued outputs and recording every request."""

    provider_name = "fake"

    def __init__(self, replies=None, error=None):
        super().__init__(api_key="fake-key", model="fake-model")
        self.replies = list(replies or [])
        self.error = error
        self.calls = []

    async def chat_completion(self, messages, system=None, temperature=None,
                              max_tokens=None, **kwargs):
        self.calls.append({
            "messages": list(messages),
            "system": system,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if self.error is not None:
            raise self.error
        content = self.replies.pop(0) if self.replies else reply_json("Could you describe the problem?")
        return LLMResponse(content=content, model=self.model)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path / "data"))


@pytest.fixture
def chat_storage(storage):
    return ChatStorage(storage)


@pytest.fixture
def fake_llm():
    return FakeLLMProvider()


@pytest.fixture
def client(storage, fake_llm):
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_llm_provider] = lambda: fake_llm
    yield TestClient(app)
    app.dependency_overrides.clear()


def _headers(user_id):
    token = create_access_token(user_id, username=user_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return _headers("user-1")


@pytest.fixture
def other_auth_headers():
    return _headers("user-2")
