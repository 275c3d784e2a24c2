import os

# 必须在导入应用之前设置，config 在 import 时读取环境变量
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PEXELS_API_KEY"] = "test-pexels-key"
os.environ["PEXELS_API_URL"] = "https://pexels.test/v1"
os.environ["TRANSLATION_API_URL"] = "http://translator.test/translate"
os.environ["AUDIO_CLEANUP_ENABLED"] = "false"

import httpx
import pytest
from fastapi.testclient import TestClient
from fastapi_cache import FastAPICache
from fastapi_cache.backends.inmemory import InMemoryBackend
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import dictionary_backend.app.models  # noqa: F401
from dictionary_backend.app.core.database import Base, get_db
from dictionary_backend.app.models import LanguageCode, PartOfSpeech, UserRole
from dictionary_backend.app.schemas.dictionary import WordEntryCreate
from dictionary_backend.app.services import dictionary_service
from dictionary_backend.app.services.user_service import UserService
from dictionary_backend.app.utils import http_client
from learning_backend.routes.auth_utils import token_for_user
from run_main import create_unified_app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def init_cache():
    FastAPICache.init(InMemoryBackend(), prefix="test-cache")
    yield


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def app(db_session):
    app = create_unified_app()

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    # 不用 with 语句，避免触发 startup（真实数据库 / Redis / 定时任务）
    return TestClient(app)


@pytest.fixture
def user(db_session):
    return UserService.create_user(
        db_session,
        email="learner@example.com",
        password="secret123",
        name="Learner",
    )


@pytest.fixture
def other_user(db_session):
    return UserService.create_user(
        db_session,
        email="someone@example.com",
        password="secret123",
        name="Someone",
    )


@pytest.fixture
def admin(db_session):
    return UserService.create_user(
        db_session,
        email="admin@example.com",
        password="secret123",
        name="Admin",
        role=UserRole.admin,
    )


def bearer(u):
    return {"Authorization": f"Bearer {token_for_user(u)}"}


@pytest.fixture
def headers_for():
    return bearer


@pytest.fixture
def auth_headers(user):
    return bearer(user)


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)


@pytest.fixture
def add_word(db_session):
    """Factory: store a word entry and return the ids dict."""

    def _add(word="hund", definition="a dog", language_code=LanguageCode.da,
             part_of_speech=PartOfSpeech.noun, examples=None, owner=None):
        data = WordEntryCreate(
            word=word,
            language_code=language_code,
            part_of_speech=part_of_speech,
            definition=definition,
            examples=[{"example": e} for e in (examples or [])],
            add_to_user_dictionary=owner is not None,
        )
        return dictionary_service.add_word_entry(db_session, data, user=owner)

    return _add


@pytest.fixture
def mock_http():
    """
    Route outgoing httpx calls to a handler. Usage:
        mock_http(lambda request: httpx.Response(200, json={...}))
    """
    requests = []

    def _install(handler):
        def _recording(request: httpx.Request):
            requests.append(request)
            return handler(request)

        http_client.set_transport(httpx.MockTransport(_recording))
        return requests

    yield _install
    http_client.set_transport(None)
