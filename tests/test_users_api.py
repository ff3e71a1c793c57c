from courtside.security_utils import verify_jwt_token
from tests.helpers import auth_headers, error_of

PASSWORD = "correct-horse-battery"


def register(client, email="sunil@example.com", role="User", password=PASSWORD):
    return client.post(
        "/users/register",
        json={"name": "Sunil", "email": email, "password": password, "role": role, "phoneNumber": "0719876543"},
    )


def test_register_and_login(client):
    created = register(client, email="Sunil@Example.com")
    assert created.status_code == 201, created.text
    assert created.json()["email"] == "sunil@example.com"
    assert created.json()["role"] == "User"

    response = client.post("/users/login", json={"email": "sunil@example.com", "password": PASSWORD})

    assert response.status_code == 200
    token = response.json()["accessToken"]
    claims = verify_jwt_token(token)
    assert claims["sub"] == str(created.json()["id"])
    assert claims["role"] == "User"

    me = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["name"] == "Sunil"


def test_coaches_can_self_register(client):
    assert register(client, role="Coach").json()["role"] == "Coach"


def test_admin_cannot_self_register(client):
    response = register(client, role="Admin")
    assert response.status_code == 400
    assert error_of(response)["code"] == "InvalidRole"


def test_duplicate_email(client):
    register(client)
    response = register(client)
    assert response.status_code == 409
    assert error_of(response)["code"] == "EmailTaken"


def test_wrong_password(client):
    register(client)
    response = client.post("/users/login", json={"email": "sunil@example.com", "password": "nope-nope-nope"})
    assert response.status_code == 401


def test_short_password_rejected(client):
    assert register(client, password="short").status_code == 422


def test_update_me(client, user, other_user):
    response = client.put("/users/me", json={"name": "Nimal P.", "phoneNumber": "0700000000"}, headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["name"] == "Nimal P."
    assert response.json()["phoneNumber"] == "0700000000"

    taken = client.put("/users/me", json={"email": other_user.email}, headers=auth_headers(user))
    assert taken.status_code == 409
    assert error_of(taken)["code"] == "EmailTaken"


def test_deactivated_user_cannot_authenticate(client, user, admin):
    response = client.put(f"/users/toggle/{user.id}", json={"isActive": False}, headers=auth_headers(admin))
    assert response.json()["isActive"] is False

    assert client.get("/users/me", headers=auth_headers(user)).status_code == 401
    login = client.post("/users/login", json={"email": user.email, "password": PASSWORD})
    assert login.status_code == 401


def test_admin_lists_users(client, user, admin):
    response = client.get("/users", headers=auth_headers(admin))
    assert {u["email"] for u in response.json()} == {user.email, admin.email}
    assert client.get("/users", headers=auth_headers(user)).status_code == 403


def test_missing_and_bad_tokens(client):
    assert client.get("/users/me").status_code == 401
    assert client.get("/users/me", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401
