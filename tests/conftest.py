"""
Pytest configuration and shared fixtures.
"""

import json
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core import config  # noqa: E402
from core.database import create_schema, get_connection, load_mock_data  # noqa: E402

API_KEY = "test-api-key"


@pytest.fixture
def mock_data():
    """The JSON mock dataset shipped for local development."""
    with open(config.MOCK_DATA_PATH, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def db_path(tmp_path, mock_data):
    """Temporary SQLite database seeded with the mock dataset."""
    path = tmp_path / "staffing.db"
    conn = get_connection(path)
    create_schema(conn)
    load_mock_data(conn, mock_data)
    conn.close()
    return path


@pytest.fixture
def conn(db_path):
    connection = get_connection(db_path)
    yield connection
    connection.close()


@pytest.fixture
def client(db_path, monkeypatch):
    """API test client bound to the temporary database."""
    from fastapi.testclient import TestClient

    monkeypatch.setattr(config, "STAFFING_API_KEY", API_KEY)
    monkeypatch.setattr(config, "DB_PATH", db_path)

    from api.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def headers():
    return {"X-API-Key": API_KEY, "X-User-Role": "admin"}


@pytest.fixture
def sample_employees():
    return [
        {"id": "e1", "name": "Ada Lovelace", "grade": "SC", "email": None},
        {"id": "e2", "name": "Grace Hopper", "grade": "SM", "email": None},
    ]


@pytest.fixture
def sample_opportunities():
    """Two overlapping Q1 2025 opportunities staffing e1 at 40% and 70%."""
    return [
        {
            "id": "o1",
            "client_name": "Acme",
            "expected_start_date": "2025-01-01",
            "expected_end_date": "2025-03-31",
            "roles": [
                {"id": "r1", "role_name": "Developer", "allocation": 40, "assigned_member_ids": ["e1"]},
                {"id": "r2", "role_name": "Tester", "allocation": 50, "assigned_member_ids": ["e2"]},
            ],
        },
        {
            "id": "o2",
            "client_name": "Globex",
            "expected_start_date": "2025-02-01",
            "expected_end_date": "2025-06-30",
            "roles": [
                {"id": "r3", "role_name": "Architect", "allocation": 70, "assigned_member_ids": ["e1"]},
            ],
        },
    ]
