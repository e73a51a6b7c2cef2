import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="assistente-legislativo-tests-")

os.environ["DB_DRIVER_NAME"] = "sqlite"
os.environ["DB_DATABASE_NAME"] = os.path.join(_TMP_DIR, "test.db")
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["API_KEY"] = "sk-test-openai-key"
os.environ["INTERNAL_LAWS_API_URL"] = "http://laws.test/v1/chat/completions"
os.environ["ENV_FILE_PATH"] = os.path.join(_TMP_DIR, "app.env")

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from langchain_core.messages import AIMessage  # noqa: E402

from backend.api import ai_responses  # noqa: E402
from backend.api.utils import create_access_token  # noqa: E402
from backend.database.config.connection_engine import connection_engine, metadata  # noqa: E402
from backend.database.core import funcs  # noqa: E402
from backend.database.entities.role import ADMIN_ROLE_ID, USER_ROLE_ID  # noqa: E402
from backend.main import app  # noqa: E402

import backend.database.entities  # noqa: E402,F401


class FakeChatModel:
    """Stands in for ChatOpenAI: records every call and answers through `reply`."""

    def __init__(self):
        self.calls = []
        self.reply = self.default_reply

    @staticmethod
    def default_reply(messages):
        system, question = messages[0].content, messages[-1].content
        if system == ai_responses.TITLE_SYSTEM_PROMPT:
            return "Título de teste"
        if system == ai_responses.LAWS_FALLBACK_SYSTEM_PROMPT:
            return f"Fallback: {question}"
        return f"Resposta: {question}"

    async def ainvoke(self, messages):
        self.calls.append(messages)
        return AIMessage(content=self.reply(messages))

    def system_prompts(self):
        return [messages[0].content for messages in self.calls]


@pytest.fixture(autouse=True)
def database():
    metadata.drop_all(connection_engine)
    metadata.create_all(connection_engine)
    funcs.seed_roles()
    yield
    metadata.drop_all(connection_engine)


@pytest.fixture(autouse=True)
def fake_llm(monkeypatch):
    model = FakeChatModel()
    monkeypatch.setattr(ai_responses, "get_chat_model", lambda temperature, max_tokens: model)
    return model


@pytest.fixture
def laws_api(monkeypatch):
    """Route laws endpoint calls to a handler set by the test (default: HTTP 503)."""
    state = {"handler": lambda request: httpx.Response(503), "requests": []}

    def handler(request):
        state["requests"].append(request)
        return state["handler"](request)

    monkeypatch.setattr(
        ai_responses,
        "_laws_http_client",
        lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    return state


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user():
    counter = {"n": 0}

    def _make_user(name="Servidor", email=None, password="senha123", role_id=USER_ROLE_ID):
        counter["n"] += 1
        email = email or f"user{counter['n']}@cabedelo.pb.gov.br"
        return funcs.create_user(name=name, email=email, password=password, role_id=role_id)

    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token = create_access_token({"sub": str(user["id"]), "email": user["email"]})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def user(make_user):
    return make_user(name="Maria Servidora", email="maria@cabedelo.pb.gov.br")


@pytest.fixture
def admin(make_user):
    return make_user(name="Administrador", email="admin@cabedelo.pb.gov.br", role_id=ADMIN_ROLE_ID)
