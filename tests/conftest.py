import uuid

import fakeredis
import pytest
from fakeredis import aioredis as fake_aioredis
from fastapi.testclient import TestClient

from logdash.core import redis_client
from logdash.core.tree_store import get_tree_store
from logdash.main import app


@pytest.fixture(scope="function", autouse=True)
def reset_redis():
    """Give every test its own empty in-memory Redis."""
    redis_client._redis_client = fake_aioredis.FakeRedis(server=fakeredis.FakeServer())
    get_tree_store().redis = None

    yield

    redis_client._redis_client = None
    get_tree_store().redis = None


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def unique_id():
    return uuid.uuid4().hex[:8]


@pytest.fixture
def tree(client):
    """Run tree store coroutines on the test client's event loop."""

    class TreeCaller:
        def __getattr__(self, name):
            method = getattr(get_tree_store(), name)
            return lambda *args: client.portal.call(method, *args)

    return TreeCaller()


@pytest.fixture
def seed(tree):
    return tree.set
