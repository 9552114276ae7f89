import logging
import pytest
from sqlalchemy import text
from werkzeug.security import check_password_hash


def test_create_request_defaults(client):
    # ONLY THE REQUESTER AND THE LOCATION ARE SUBMITTED
    response = client.post("/api/requests", json={"userId": "42", "location": "Lot A"})
    assert response.status_code == 201

    data = response.json()
    assert data["id"] > 0
    assert data["userId"] == "42"
    assert data["userName"] == "Unknown"
    assert data["userPhone"] == ""
    assert data["location"] == "Lot A"
    assert data["status"] == "requested"
    assert data["vehicle"] == {}
    assert data["timestamp"] is not None
    assert data["valetId"] is None
    assert data["spotId"] is None


def test_create_request_identity_sentinels(client):
    data = client.post("/api/requests", json={}).json()
    assert data["userId"] == "999"
    assert data["userName"] == "Unknown"
    assert data["userPhone"] == ""


def test_create_request_keeps_supplied_fields(client):
    payload = {
        "id": 1234,
        "userId": "7",
        "userName": "Alice",
        "userPhone": "555-0101",
        "vehicle": {"plate": "KII444", "color": "red", "model": "Civic"},
        "location": "Terminal 2",
        "timestamp": "2026-05-01T12:00:00Z",
    }
    response = client.post("/api/requests", json=payload)
    assert response.status_code == 201

    data = response.json()
    assert data["id"] == 1234
    assert data["userName"] == "Alice"
    assert data["userPhone"] == "555-0101"
    assert data["vehicle"] == payload["vehicle"]
    assert data["timestamp"].startswith("2026-05-01T12:00:00")


def test_create_request_duplicate_id(client):
    assert client.post("/api/requests", json={"id": 5}).status_code == 201

    response = client.post("/api/requests", json={"id": 5})
    assert response.status_code == 409
    assert "already exists" in response.json()["detail"]

    # THE FIRST REQUEST IS STILL THE ONLY ONE STORED
    assert len(client.get("/api/requests").json()) == 1


def test_create_request_invalid_timestamp(client):
    response = client.post("/api/requests", json={"timestamp": "not a date"})
    assert response.status_code == 422


def test_create_request_queues_for_dispatch(client_and_redis):
    client, redis_client = client_and_redis

    data = client.post("/api/requests", json={"id": 11}).json()
    redis_client.rpush.assert_called_once_with("valet_queue", data["id"])


def test_create_request_already_assigned_is_not_queued(client_and_redis):
    client, redis_client = client_and_redis

    client.post("/api/requests", json={"id": 12, "status": "accepted", "valetId": "7", "valetName": "Bob"})
    redis_client.rpush.assert_not_called()


def test_read_pending_queue(client_and_redis):
    client, redis_client = client_and_redis
    redis_client.lrange.return_value = [b"11", b"12"]

    response = client.get("/api/requests/queue")
    assert response.status_code == 200
    assert response.json() == {"pending": [11, 12]}


def signup(client, **overrides):
    payload = {"name": "Alice", "email": "alice@example.com", "password": "s3cret", "role": "user"}
    payload.update(overrides)
    return client.post("/api/auth/signup", json=payload)


def test_signup(client):
    response = signup(client)
    assert response.status_code == 201

    data = response.json()
    assert data["id"] > 0
    assert data["email"] == "alice@example.com"
    assert data["role"] == "user"
    assert "password" not in data


def test_signup_duplicate_email(client):
    assert signup(client).status_code == 201

    response = signup(client, name="Other Alice")
    assert response.status_code == 400
    assert response.json()["detail"] == "User already exists."


def test_signup_unknown_role(client):
    response = signup(client, role="superuser")
    assert response.status_code == 400


@pytest.mark.parametrize(
    "email, password, expected_status_code",
    [
        # Case 1: Correct credentials
        ("alice@example.com", "s3cret", 200),

        # Case 2: Wrong password
        ("alice@example.com", "wrong", 401),

        # Case 3: Unknown email
        ("nobody@example.com", "s3cret", 401),
    ]
)
def test_login(client, email, password, expected_status_code):
    signup(client, role="valet")

    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == expected_status_code

    data = response.json()
    if expected_status_code == 200:
        assert data["name"] == "Alice"
        assert data["role"] == "valet"
        assert "password" not in data
    else:
        assert data["detail"] == "Invalid credentials"


def test_signup_stores_password_hash(client):
    signup(client)

    # THE STORED VALUE IS A WERKZEUG HASH, NEVER THE PLAIN PASSWORD
    with client.app.state.engine.connect() as connection:
        stored = connection.execute(text("SELECT password FROM users WHERE email = :email"),
                                    {"email": "alice@example.com"}).scalar_one()

    assert stored != "s3cret"
    assert check_password_hash(stored, "s3cret")
    assert not check_password_hash(stored, "wrong")


def test_create_request_with_numeric_identity(client):
    # CLIENTS PASS users.id STRAIGHT THROUGH AS A NUMBER
    response = client.post("/api/requests", json={"userId": 42, "userPhone": 5550101, "location": "Lot A"})
    assert response.status_code == 201

    data = response.json()
    assert data["userId"] == "42"
    assert data["userPhone"] == "5550101"


def test_invalid_body_is_not_logged_as_database_error(client, caplog):
    with caplog.at_level(logging.ERROR, logger="valet_api.database"):
        response = client.post("/api/requests", json={"timestamp": "not a date"})

    assert response.status_code == 422
    assert not [record for record in caplog.records if record.name == "valet_api.database"]
