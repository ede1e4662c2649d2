import pytest
from fastapi.testclient import TestClient

from catalog_api.app.core.config import Settings
from catalog_api.app.core.db import InMemoryDocumentStore, SQLiteDocumentStore, init_db
from catalog_api.app.main import create_app


class RecordingMailer:
    """Stands in for ``Mailer`` and keeps what would have been sent."""

    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    async def send(self, subject, html_body):
        if self.fail:
            raise ConnectionRefusedError("mail server down")
        self.sent.append((subject, html_body))
        return True


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=str(tmp_path / "catalog.db"),
        mock_db=False,
        db_populate=True,
        mail_host="skip",
        secret_key="test-secret",
        admin_password="p",
        log_level="WARNING",
    )


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    response = client.post("/api/login", json={"username": "admin", "password": "p"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture(params=["sqlite", "memory"])
def store(request, tmp_path):
    if request.param == "sqlite":
        document_store = SQLiteDocumentStore(str(tmp_path / "store.db"))
    else:
        document_store = InMemoryDocumentStore()
    init_db(document_store, populate=True)
    return document_store


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def failing_mailer():
    return RecordingMailer(fail=True)
