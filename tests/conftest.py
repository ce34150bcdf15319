import json
import os

os.environ.setdefault("RUN_RATE_LIMIT", "1000/minute")
os.environ.setdefault("REALTIME_ENABLED", "false")
os.environ.setdefault("SUPABASE_URL", "")

import httpx
import pytest
from fastapi import Depends
from fastapi.testclient import TestClient

from app.core.dependencies import get_current_user_id, get_user_supabase
from app.database.supabase_client import get_supabase, get_service_supabase
from app.main import app
from app.modules.auth.service import _AUTH_USER_CACHE
from app.modules.runner.service import get_http_client
from app.modules.terminal import registry
from tests.fakes import FakeStore, FakeSupabase, token_for


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {token_for(user_id)}"}


class FakeCompileService:
    """Answers compile requests with canned JSON, or with a callable of the request body."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.body = {"status": "0", "program_output": "ok\n"}
        self.program = None
        self.error = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append({"url": str(request.url), "json": payload})
        if self.error is not None:
            raise self.error
        if self.program is not None:
            return httpx.Response(200, json=self.program(payload))
        if isinstance(self.body, str):
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(self.status_code, json=self.body)


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def compile_service():
    return FakeCompileService()


@pytest.fixture
def client(store, compile_service):
    def _user_supabase(user_data: dict = Depends(get_current_user_id)):
        return FakeSupabase(store, user_data["id"])

    def _http_client():
        return httpx.AsyncClient(transport=httpx.MockTransport(compile_service.handler))

    app.dependency_overrides[get_supabase] = lambda: FakeSupabase(store)
    app.dependency_overrides[get_service_supabase] = lambda: FakeSupabase(store)
    app.dependency_overrides[get_user_supabase] = _user_supabase
    app.dependency_overrides[get_http_client] = _http_client
    yield TestClient(app)
    app.dependency_overrides.clear()
    registry.clear()
    _AUTH_USER_CACHE.clear()


@pytest.fixture
def alice(store):
    return store.add_user("alice@example.com", "alice", "🦊")


@pytest.fixture
def bob(store):
    return store.add_user("bob@example.com", "bob", "🐼")


@pytest.fixture
def carol(store):
    return store.add_user("carol@example.com", "carol", "🚀")
