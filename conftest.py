import os
import sys

import pytest
from fastapi.testclient import TestClient

# Make the root-level packages importable without installing
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from log_service.main import create_app
from log_service.store import LogStore


@pytest.fixture
def log_path(tmp_path):
    return tmp_path / "server.log"


@pytest.fixture
def store(log_path):
    return LogStore(str(log_path))


@pytest.fixture
def client(store):
    with TestClient(create_app(store)) as c:
        yield c
