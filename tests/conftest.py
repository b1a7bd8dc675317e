import pytest
import requests

from core.db import PipelineConfig, SqlClient
from tests.helpers import FakePipelineServer


@pytest.fixture
def config() -> PipelineConfig:
    return PipelineConfig(url="libsql://test-db.turso.io", token="secret-token", timeout=5)


@pytest.fixture
def fake_remote(monkeypatch):
    remote = FakePipelineServer()
    monkeypatch.setattr(requests, "post", remote.post)
    yield remote
    remote.close()


@pytest.fixture
def client(config, fake_remote) -> SqlClient:
    return SqlClient(config)
