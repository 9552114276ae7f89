import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient
from valet_api.config import Config
from valet_api.main import create_app
from valet_api.utils.dispatch_queue import DispatchQueue


def make_client(strict_transitions=False):
    config = Config(database_url="sqlite://", strict_transitions=strict_transitions)
    redis_client = MagicMock()
    redis_client.lrange.return_value = []
    app = create_app(config, queue=DispatchQueue(redis_client, Config.QUEUE_KEY))
    return TestClient(app), redis_client


@pytest.fixture
def client():
    test_client, _ = make_client()
    with test_client:
        yield test_client


@pytest.fixture
def strict_client():
    test_client, _ = make_client(strict_transitions=True)
    with test_client:
        yield test_client


@pytest.fixture
def client_and_redis():
    test_client, redis_client = make_client()
    with test_client:
        yield test_client, redis_client
