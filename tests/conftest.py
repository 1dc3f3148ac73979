"""Test configuration and fixtures.

Every test gets its own registry state file under ``tmp_path``; nothing reads
or writes the configured ``STATE_FILE``. API tests run the real application
through ``TestClient``, which is also an ``httpx.Client`` and so doubles as
the transport of the remote registry client.
"""

from pathlib import Path
import os

import pytest
from fastapi.testclient import TestClient
from loguru import logger

from api.main import create_app
from core.clients.registry_client import RemoteRegistryClient
from core.registry import BotRegistry, LocalRegistryClient


ROOT = Path(__file__).resolve().parents[1]

# Sanitize env vars that may contain inline comments (e.g. "7762 # api").
# Some CI or shell exports accidentally include comments which break pydantic int parsing.
for _k, _v in list(os.environ.items()):
    if isinstance(_v, str) and '#' in _v:
        cleaned = _v.split('#', 1)[0].strip()
        if cleaned != _v:
            os.environ[_k] = cleaned


@pytest.fixture(autouse=True)
def _reset_log_sinks():
    # setup_logging() binds sinks to the (captured) stderr of the calling test
    yield
    logger.remove()


@pytest.fixture
def state_file(tmp_path) -> Path:
    return tmp_path / "state.json"


@pytest.fixture
def registry(state_file) -> BotRegistry:
    return BotRegistry.open(state_file)


@pytest.fixture
def local_client(state_file) -> LocalRegistryClient:
    return LocalRegistryClient.open(state_file)


@pytest.fixture
def api_client(state_file):
    with TestClient(create_app(state_file)) as client:
        yield client


@pytest.fixture
def remote_client(api_client) -> RemoteRegistryClient:
    return RemoteRegistryClient(base_url="http://testserver", timeout=5, client=api_client)


@pytest.fixture(params=["local", "remote"])
def facade(request, state_file):
    """Each registry facade in turn, both backed by a fresh state file."""
    if request.param == "local":
        yield LocalRegistryClient.open(state_file)
        return
    with TestClient(create_app(state_file)) as client:
        yield RemoteRegistryClient(base_url="http://testserver", timeout=5, client=client)
