import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from core import telemetry
from db.sqlite import StatementExecutor

SCHEMA = """
CREATE TABLE IF NOT EXISTS t (
    id INTEGER PRIMARY KEY,
    name TEXT
);
CREATE INDEX IF NOT EXISTS idx_t_name ON t(name);
"""


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "data" / "test.db")


@pytest.fixture
def schema():
    return SCHEMA


# Fresh store with the small test schema applied
@pytest.fixture
def store(db_path):
    ex = StatementExecutor(db_path, SCHEMA)
    ex.initialize()
    return ex


# Point the host config at a temp data dir and the bundled schema
@pytest.fixture
def app_env(monkeypatch, tmp_path):
    monkeypatch.setenv("APP_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("DB_URL", "sqlite:///data/app.db")
    monkeypatch.delenv("DB_SCHEMA", raising=False)
    monkeypatch.delenv("DB_TIMEOUT", raising=False)
    telemetry.reset()
    yield tmp_path
    telemetry.reset()


@pytest_asyncio.fixture(scope="function")
async def client(app_env):
    from server.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
