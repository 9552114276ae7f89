from unittest.mock import MagicMock
from redis import RedisError
from sqlalchemy import inspect, text
from valet_api.config import Config
from valet_api.database import build_engine, init_db
from valet_api.utils.dispatch_queue import DispatchQueue


def test_init_db_creates_tables():
    engine = build_engine(Config(database_url="sqlite://"))
    init_db(engine)

    tables = inspect(engine).get_table_names()
    assert "requests" in tables
    assert "users" in tables


def test_init_db_patches_old_requests_table():
    engine = build_engine(Config(database_url="sqlite://"))

    # A requests TABLE FROM BEFORE THE VALET COLUMNS EXISTED
    with engine.begin() as connection:
        connection.execute(text("""
            CREATE TABLE requests (
                id BIGINT PRIMARY KEY, user_id VARCHAR, user_name VARCHAR, user_phone VARCHAR,
                vehicle JSON, location VARCHAR, status VARCHAR, timestamp DATETIME
            )
        """))

    init_db(engine)

    columns = {column["name"] for column in inspect(engine).get_columns("requests")}
    for name in ("valet_id", "valet_name", "parked_timestamp", "exit_timestamp", "spot_id"):
        assert name in columns

    # RUNNING IT AGAIN IS A NO-OP
    init_db(engine)


def test_disabled_queue():
    queue = DispatchQueue.from_url(None)
    assert not queue.enabled
    queue.enqueue(1)
    assert queue.pending() == []


def test_queue_errors_do_not_propagate():
    redis_client = MagicMock()
    redis_client.rpush.side_effect = RedisError("connection refused")
    redis_client.lrange.side_effect = RedisError("connection refused")

    queue = DispatchQueue(redis_client)
    queue.enqueue(1)
    assert queue.pending() == []
