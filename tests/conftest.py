import os
import tempfile
from io import BytesIO

import pytest

# Point the app at a throwaway database and log file BEFORE any toystock import,
# settings are read once at import time.
_TMP_DIR = tempfile.mkdtemp(prefix="toystock-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test_stocks.db')}"
os.environ["LOG_FILE_PATH"] = os.path.join(_TMP_DIR, "app.log")
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["SEED_DEMO_DATA"] = "false"

from openpyxl import Workbook  # noqa: E402

from toystock.core.security import create_access_token  # noqa: E402
from toystock.db.database import get_connection, init_db  # noqa: E402
from toystock.models.user import UserContext  # noqa: E402
from toystock.services.stock_list import sessions  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def _schema():
    init_db()


@pytest.fixture(autouse=True)
def clean_state():
    """Empty the stocks table and forget cached sessions around every test."""
    conn = get_connection()
    try:
        conn.execute("DELETE FROM stocks")
        conn.commit()
    finally:
        conn.close()
    sessions.clear()
    yield
    sessions.clear()


@pytest.fixture
def conn():
    connection = get_connection()
    try:
        yield connection
    finally:
        connection.close()


@pytest.fixture
def user():
    return UserContext(id="owner-1", email="owner@primetoys.test")


@pytest.fixture
def other_user():
    return UserContext(id="owner-2", email="other@primetoys.test")


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from toystock.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_workbook():
    """Build .xlsx bytes from a header row and data rows."""

    def _make(header, rows, sheet_title="Sheet1"):
        workbook = Workbook()
        ws = workbook.active
        ws.title = sheet_title
        ws.append(list(header))
        for row in rows:
            ws.append(list(row))
        buffer = BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

    return _make
