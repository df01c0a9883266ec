"""API endpoint tests."""

from datetime import datetime

from sqlalchemy.exc import OperationalError

from src.models.sensor_reading import SensorReading


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_signup(client):
    """Test user signup."""
    response = client.post(
        "/signup",
        json={"name": "New User", "email": "newuser@example.com", "password": "password123"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["token"]
    assert data["token_type"] == "bearer"
    assert data["user"]["name"] == "New User"
    assert data["user"]["email"] == "newuser@example.com"
    assert "password" not in data["user"]
    assert "password_hash" not in data["user"]


def test_signup_normalizes_email(client):
    """Test emails are stored lower-cased and trimmed."""
    response = client.post(
        "/signup",
        json={"name": "Mixed", "email": "  Mixed@Example.COM ", "password": "password123"},
    )
    assert response.status_code == 201
    assert response.json()["user"]["email"] == "mixed@example.com"


def test_signup_duplicate_email(client, auth_headers):
    """Test signup with duplicate email fails with a conflict."""
    response = client.post(
        "/signup",
        json={"name": "Duplicate", "email": auth_headers.email, "password": "password123"},
    )
    assert response.status_code == 409
    assert response.json()["error"] == "conflict"
    assert "already exists" in response.json()["message"]


def test_signup_duplicate_email_different_case(client, auth_headers):
    """Test the uniqueness check is not fooled by letter case."""
    response = client.post(
        "/signup",
        json={"name": "Duplicate", "email": "TEST@example.com", "password": "password123"},
    )
    assert response.status_code == 409


def test_signup_missing_fields(client):
    """Test signup without a password is rejected."""
    response = client.post("/signup", json={"name": "No Password", "email": "np@example.com"})
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "validation_error"
    assert any(detail["field"] == "password" for detail in body["details"])


def test_signup_blank_name(client):
    """Test a whitespace-only name is rejected."""
    response = client.post(
        "/signup", json={"name": "   ", "email": "blank@example.com", "password": "password123"}
    )
    assert response.status_code == 400


def test_signup_invalid_json(client):
    """Test a body that is not JSON is a validation error, not a crash."""
    response = client.post(
        "/signup", content="not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


def test_signup_json_array(client):
    """Test a JSON body that is not an object is rejected."""
    response = client.post("/signup", json=["Ana", "ana@x.com", "secret1"])
    assert response.status_code == 400


def test_login(client, auth_headers):
    """Test user login."""
    response = client.post("/login", json={"email": auth_headers.email, "password": "testpass123"})
    assert response.status_code == 200
    data = response.json()
    assert data["token"]
    assert data["user"]["id"] == auth_headers.user_id


def test_login_wrong_password(client, auth_headers):
    """Test login with wrong password."""
    response = client.post("/login", json={"email": auth_headers.email, "password": "wrongpass"})
    assert response.status_code == 401
    assert response.json()["error"] == "auth_error"


def test_login_does_not_reveal_unknown_email(client, auth_headers):
    """Test unknown email and wrong password produce the same answer."""
    wrong_password = client.post(
        "/login", json={"email": auth_headers.email, "password": "wrongpass"}
    )
    unknown_email = client.post(
        "/login", json={"email": "nobody@example.com", "password": "wrongpass"}
    )
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()


def test_login_missing_fields(client):
    """Test login without a password is a validation error."""
    response = client.post("/login", json={"email": "test@example.com"})
    assert response.status_code == 400


def test_get_current_user(client, auth_headers):
    """Test getting current user info."""
    response = client.get("/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["email"] == auth_headers.email
    assert response.json()["name"] == "Test User"


def test_logout_api_client(client, auth_headers):
    """Test logout for API clients just acknowledges."""
    response = client.post("/logout", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"


def test_submit_reading(client, auth_headers):
    """Test submitting a reading."""
    response = client.post(
        f"/sensor-data/{auth_headers.user_id}",
        headers=auth_headers,
        json={"temperature": 21.5, "humidity": 40},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Sensor data saved successfully"
    assert body["data"]["temperature"] == 21.5
    assert body["data"]["humidity"] == 40
    assert body["data"]["user_id"] == auth_headers.user_id
    assert body["data"]["created_at"]


def test_submit_reading_ignores_path_user_id(client, db, auth_headers, other_auth_headers):
    """Test the owner comes from the token, not from the URL."""
    response = client.post(
        f"/sensor-data/{other_auth_headers.user_id}",
        headers=auth_headers,
        json={"temperature": 19.0, "humidity": 55.0},
    )
    assert response.status_code == 201
    assert response.json()["data"]["user_id"] == auth_headers.user_id

    other_rows = db.query(SensorReading).filter(SensorReading.user_id == other_auth_headers.user_id)
    assert other_rows.count() == 0


def test_submit_reading_requires_auth(client, auth_headers):
    """Test submitting without a token is rejected with a JSON body."""
    response = client.post(
        f"/sensor-data/{auth_headers.user_id}", json={"temperature": 21.5, "humidity": 40}
    )
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.json()["error"] == "auth_error"


def test_submit_reading_unknown_user(client, db, token_service):
    """Test a valid token for a user that does not exist writes nothing."""

    class Ghost:
        id = 987654
        email = "ghost@example.com"

    token = token_service.issue(Ghost())
    response = client.post(
        "/sensor-data/987654",
        headers={"Authorization": f"Bearer {token}"},
        json={"temperature": 20.0, "humidity": 30.0},
    )
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"
    assert db.query(SensorReading).count() == 0


def test_submit_reading_rejects_non_numeric(client, auth_headers):
    """Test temperature and humidity must be JSON numbers."""
    url = f"/sensor-data/{auth_headers.user_id}"
    for payload in (
        {"temperature": "21.5", "humidity": 40},
        {"temperature": 21.5, "humidity": True},
        {"temperature": None, "humidity": 40},
        {"humidity": 40},
    ):
        response = client.post(url, headers=auth_headers, json=payload)
        assert response.status_code == 400, payload
        assert response.json()["error"] == "validation_error"


def test_submit_reading_rejects_out_of_range_number(client, db, auth_headers):
    """Test an integer too large for a float is a validation error, not a crash."""
    huge = "1" + "0" * 400
    response = client.post(
        f"/sensor-data/{auth_headers.user_id}",
        headers={**auth_headers, "Content-Type": "application/json"},
        content=f'{{"temperature": {huge}, "humidity": 40}}',
    )
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "validation_error"
    assert any(detail["field"] == "temperature" for detail in body["details"])
    assert db.query(SensorReading).count() == 0


def test_submit_reading_store_failure(client, db, auth_headers, monkeypatch):
    """Test a failing store answers 500 without internal detail."""

    def broken_commit():
        raise OperationalError("INSERT INTO sensor_readings", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", broken_commit)
    response = client.post(
        f"/sensor-data/{auth_headers.user_id}",
        headers=auth_headers,
        json={"temperature": 21.5, "humidity": 40},
    )
    assert response.status_code == 500
    assert response.json() == {"error": "store_error", "message": "Failed to save sensor data"}
    assert "disk I/O" not in response.text


def test_list_readings(client, auth_headers):
    """Test the documented end-to-end example."""
    client.post(
        f"/sensor-data/{auth_headers.user_id}",
        headers=auth_headers,
        json={"temperature": 21.5, "humidity": 40},
    )

    response = client.get("/sensor-data", headers=auth_headers)
    assert response.status_code == 200
    readings = response.json()
    assert len(readings) == 1
    assert readings[0]["temperature"] == 21.5
    assert readings[0]["humidity"] == 40


def test_list_readings_newest_first(client, auth_headers):
    """Test readings come back newest first."""
    for temperature in (10.0, 11.0, 12.0):
        client.post(
            f"/sensor-data/{auth_headers.user_id}",
            headers=auth_headers,
            json={"temperature": temperature, "humidity": 50.0},
        )

    readings = client.get("/sensor-data", headers=auth_headers).json()
    assert [r["temperature"] for r in readings] == [12.0, 11.0, 10.0]
    created = [datetime.fromisoformat(r["created_at"]) for r in readings]
    assert created == sorted(created, reverse=True)


def test_list_readings_limit(client, auth_headers):
    """Test the limit query parameter."""
    for temperature in (1.0, 2.0, 3.0):
        client.post(
            f"/sensor-data/{auth_headers.user_id}",
            headers=auth_headers,
            json={"temperature": temperature, "humidity": 50.0},
        )

    readings = client.get("/sensor-data?limit=2", headers=auth_headers).json()
    assert [r["temperature"] for r in readings] == [3.0, 2.0]

    response = client.get("/sensor-data?limit=0", headers=auth_headers)
    assert response.status_code == 400


def test_list_readings_other_user_sees_nothing(client, auth_headers, other_auth_headers):
    """Test a different user's token never returns someone else's data."""
    client.post(
        f"/sensor-data/{auth_headers.user_id}",
        headers=auth_headers,
        json={"temperature": 21.5, "humidity": 40},
    )

    response = client.get("/sensor-data", headers=other_auth_headers)
    assert response.status_code == 200
    assert response.json() == []


def test_list_readings_requires_auth(client):
    """Test listing without a token."""
    response = client.get("/sensor-data")
    assert response.status_code == 401
    assert response.json()["error"] == "auth_error"


def test_public_ingest_disabled_by_default(client):
    """Test the unauthenticated endpoint is off unless configured."""
    response = client.post("/public/sensor-data", json={"temperature": 21.5, "humidity": 40})
    assert response.status_code == 404


def test_public_ingest_enabled(client_factory, db):
    """Test the unauthenticated endpoint echoes and stores nothing."""
    with client_factory(public_ingest_enabled=True) as public_client:
        response = public_client.post(
            "/public/sensor-data", json={"temperature": 21.5, "humidity": 40}
        )
        invalid = public_client.post("/public/sensor-data", json={"temperature": "hot"})

    assert response.status_code == 201
    assert response.json() == {
        "message": "Data received successfully",
        "data": {"temperature": 21.5, "humidity": 40.0},
    }
    assert invalid.status_code == 400
    assert db.query(SensorReading).count() == 0
