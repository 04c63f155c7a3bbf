"""
Pytest fixtures for puttr tests.
"""
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from puttr.core.config import Settings
from puttr.core.security import TokenStore
from puttr.main import create_app
from puttr.services import UploadMaterializer


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


# =============================================================================
# Clock Fixtures
# =============================================================================

@pytest.fixture
def start_time():
    return datetime(2024, 3, 7, 14, 5, 9, tzinfo=timezone.utc)


@pytest.fixture
def clock(start_time):
    return FakeClock(start_time)


# =============================================================================
# Settings / Application Fixtures
# =============================================================================

@pytest.fixture
def upload_root(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def settings(upload_root, monkeypatch, tmp_path):
    """Settings isolated from the environment and any local config file."""
    monkeypatch.delenv("PUTTR_UPLOAD_ROOT", raising=False)
    monkeypatch.delenv("PUTTR_TOKEN_TTL_SECONDS", raising=False)
    monkeypatch.setenv("PUTTR_CONFIG_FILE", str(tmp_path / "missing.toml"))
    return Settings(UPLOAD_ROOT=str(upload_root), _env_file=None)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def frozen_app(app, clock, upload_root):
    """App whose token store and materializer share a fake clock."""
    app.state.token_store = TokenStore(clock=clock)
    app.state.materializer = UploadMaterializer(upload_root, clock=clock)
    return app


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


@pytest_asyncio.fixture
async def frozen_client(frozen_app):
    async with AsyncClient(
        transport=ASGITransport(app=frozen_app),
        base_url="http://test"
    ) as client:
        yield client
