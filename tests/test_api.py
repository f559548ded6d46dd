"""Tests for the Flask transport, through Flask's test client."""

import pytest

from expense_tracker.services.storage import StorageError
from expense_tracker.web import create_app


@pytest.fixture
def client(components):
    app = create_app(components)
    app.config["TESTING"] = True
    return app.test_client()


def register(client, email="ada@example.com", password="s3cret"):
    return client.post("/auth/register", json={
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": email,
        "password": password,
    })


def login_headers(client, email="ada@example.com", password="s3cret"):
    register(client, email, password)
    response = client.post("/auth/login", json={"email": email, "password": password})
    return {"Authorization": f"Bearer {response.get_json()['token']}"}


def create_expense(client, headers, **overrides):
    body = {
        "title": "Weekly shop",
        "description": "Vegetables",
        "amount": 42.5,
        "date": "14/06/2024",
        "category": "Groceries",
    }
    body.update(overrides)
    return client.post("/expenses", json=body, headers=headers)


class TestHealth:
    """Tests for the liveness route."""

    def test_health(self, client):
        """Test that /health answers without a token."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.get_json() == {"status": "ok"}


class TestAuthRoutes:
    """Tests for /auth."""

    def test_register(self, client):
        """Test that registration returns the public user shape."""
        response = register(client)
        assert response.status_code == 201
        body = response.get_json()
        assert body["email"] == "ada@example.com"
        assert "password" not in body and "password_hash" not in body

    def test_register_duplicate(self, client):
        """Test that a second registration with the same email is 409."""
        register(client)
        assert register(client).status_code == 409

    def test_register_missing_fields(self, client):
        """Test that a missing field is 400 with the required message."""
        response = client.post("/auth/register", json={"email": "a@example.com"})
        assert response.status_code == 400
        assert response.get_json()["message"] == "All fields are required."

    def test_register_non_object_body(self, client):
        """Test that a JSON array body is 400."""
        response = client.post("/auth/register", json=["a", "b"])
        assert response.status_code == 400

    def test_login(self, client):
        """Test that login returns a message and a token."""
        register(client)
        response = client.post(
            "/auth/login", json={"email": "ada@example.com", "password": "s3cret"}
        )
        assert response.status_code == 200
        assert response.get_json()["token"]

    def test_login_wrong_password(self, client):
        """Test that a wrong password is 401."""
        register(client)
        response = client.post(
            "/auth/login", json={"email": "ada@example.com", "password": "nope"}
        )
        assert response.status_code == 401
        assert response.get_json() == {"message": "Invalid email or password"}

    def test_login_unknown_account(self, client):
        """Test that an unknown email is 404."""
        response = client.post(
            "/auth/login", json={"email": "ghost@example.com", "password": "x"}
        )
        assert response.status_code == 404
        assert response.get_json() == {"message": "Account does not exist"}


class TestAuthorizationHeader:
    """Tests for protected routes without a usable token."""

    def test_missing_header(self, client):
        """Test that no header is 401 with a JSON message."""
        response = client.get("/expenses")
        assert response.status_code == 401
        assert response.get_json() == {"message": "authorization header is missing"}

    def test_wrong_scheme(self, client):
        """Test that a non-Bearer header is 401."""
        response = client.get("/expenses", headers={"Authorization": "Token abc"})
        assert response.status_code == 401

    def test_garbage_token(self, client):
        """Test that an unreadable token is 401."""
        response = client.get("/expenses", headers={"Authorization": "Bearer abc"})
        assert response.status_code == 401

    def test_expired_token(self, client, clock):
        """Test that a token past its lifetime is 401."""
        headers = login_headers(client)
        clock.advance(minutes=61)
        response = client.get("/users/me", headers=headers)
        assert response.status_code == 401
        assert response.get_json() == {"message": "token has expired"}


class TestUserRoutes:
    """Tests for /users/me."""

    def test_get_me(self, client):
        """Test that the caller's own account is returned."""
        headers = login_headers(client)
        response = client.get("/users/me", headers=headers)
        assert response.status_code == 200
        assert response.get_json()["firstName"] == "Ada"

    def test_delete_me(self, client):
        """Test that deleting the account makes its token stop resolving."""
        headers = login_headers(client)
        assert client.delete("/users/me", headers=headers).status_code == 204
        assert client.get("/users/me", headers=headers).status_code == 401


class TestExpenseRoutes:
    """Tests for /expenses."""

    def test_create_and_get(self, client):
        """Test create (201) then get (200)."""
        headers = login_headers(client)
        created = create_expense(client, headers)
        assert created.status_code == 201
        expense_id = created.get_json()["id"]

        response = client.get(f"/expenses/{expense_id}", headers=headers)
        assert response.status_code == 200
        assert response.get_json()["amount"] == 42.5
        assert response.get_json()["date"] == "14/06/2024"

    def test_create_invalid_category(self, client):
        """Test that a bad category is 400."""
        headers = login_headers(client)
        response = create_expense(client, headers, category="Food")
        assert response.status_code == 400
        assert response.get_json()["message"] == "Invalid category provided"

    def test_list_empty_is_404(self, client):
        """Test that a caller with no expenses gets 404."""
        headers = login_headers(client)
        assert client.get("/expenses", headers=headers).status_code == 404

    def test_other_user_is_forbidden(self, client):
        """Test that another user's expense is 403 on get, update and delete."""
        alice = login_headers(client, "alice@example.com")
        bob = login_headers(client, "bob@example.com")
        expense_id = create_expense(client, alice).get_json()["id"]

        assert client.get(f"/expenses/{expense_id}", headers=bob).status_code == 403
        assert client.patch(
            f"/expenses/{expense_id}", json={"title": "x"}, headers=bob
        ).status_code == 403
        assert client.delete(f"/expenses/{expense_id}", headers=bob).status_code == 403
        assert client.get(f"/expenses/{expense_id}", headers=alice).status_code == 200

    def test_update_is_202(self, client):
        """Test that a partial update answers 202 with the merged record."""
        headers = login_headers(client)
        expense_id = create_expense(client, headers).get_json()["id"]
        response = client.patch(
            f"/expenses/{expense_id}",
            json={"title": "Bigger shop", "amount": 0},
            headers=headers,
        )
        assert response.status_code == 202
        assert response.get_json()["title"] == "Bigger shop"
        assert response.get_json()["amount"] == 42.5

    def test_delete_is_204(self, client):
        """Test delete, then a second delete is 404."""
        headers = login_headers(client)
        expense_id = create_expense(client, headers).get_json()["id"]
        assert client.delete(f"/expenses/{expense_id}", headers=headers).status_code == 204
        assert client.delete(f"/expenses/{expense_id}", headers=headers).status_code == 404

    def test_non_integer_id(self, client):
        """Test that a non-numeric id is 400."""
        headers = login_headers(client)
        assert client.get("/expenses/abc", headers=headers).status_code == 400

    def test_filters(self, client):
        """Test the filter routes against the fixed clock (15/06/2024)."""
        headers = login_headers(client)
        create_expense(client, headers, date="14/06/2024", category="Health")
        create_expense(client, headers, date="01/04/2024")

        week = client.get("/expenses/week", headers=headers)
        assert [e["date"] for e in week.get_json()] == ["14/06/2024"]

        month = client.get("/expenses/month", headers=headers)
        assert len(month.get_json()) == 1

        quarter = client.get("/expenses/past-three-month", headers=headers)
        assert len(quarter.get_json()) == 2

        dates = client.get(
            "/expenses/dates",
            query_string={"start_date": "01/04/2024", "end_date": "30/04/2024"},
            headers=headers,
        )
        assert [e["date"] for e in dates.get_json()] == ["01/04/2024"]

        category = client.get(
            "/expenses/category", query_string={"category": "Health"}, headers=headers
        )
        assert [e["category"] for e in category.get_json()] == ["Health"]

    def test_dates_missing_bound(self, client):
        """Test that a missing date bound is 400."""
        headers = login_headers(client)
        response = client.get(
            "/expenses/dates", query_string={"start_date": "01/04/2024"}, headers=headers
        )
        assert response.status_code == 400


class TestErrorHandling:
    """Tests for the error-to-response mapping."""

    def test_unknown_route_is_json_404(self, client):
        """Test that Flask's own 404 is JSON too."""
        response = client.get("/nope")
        assert response.status_code == 404
        assert "message" in response.get_json()

    def test_internal_details_are_hidden(self, client, components, monkeypatch):
        """Test that a storage failure answers 500 without its details."""
        headers = login_headers(client)

        async def broken(caller_id):
            raise StorageError("sheet 'Expenses' quota exceeded for key abc123")

        monkeypatch.setattr(components.ledger, "list_mine", broken)
        response = client.get("/expenses", headers=headers)
        assert response.status_code == 500
        assert response.get_json() == {"message": "Storage operation failed"}

    def test_server_errors_are_audited(self, client, components, monkeypatch):
        """Test that a 500 leaves a system error event with the real cause."""
        headers = login_headers(client)
        recorded = []

        async def broken(caller_id):
            raise StorageError("sheet quota exceeded")

        async def record_error(error_type, error_message, details=None):
            recorded.append((error_type, error_message))

        monkeypatch.setattr(components.ledger, "list_mine", broken)
        monkeypatch.setattr(components.audit_logger, "log_error", record_error)
        response = client.get("/expenses", headers=headers)
        assert response.status_code == 500
        assert recorded == [("StorageError", "sheet quota exceeded")]

    def test_client_errors_are_not_audited_as_system_errors(self, client, components, monkeypatch):
        """Test that a 4xx answer does not produce a system error event."""
        recorded = []

        async def record_error(error_type, error_message, details=None):
            recorded.append(error_type)

        monkeypatch.setattr(components.audit_logger, "log_error", record_error)
        response = client.get("/expenses")
        assert response.status_code == 401
        assert recorded == []
