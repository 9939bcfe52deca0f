from fastapi import status

from contactbook import users


def register(client, username="u1", password="p1", name="User One"):
    return client.post(
        "/api/users",
        json={"username": username, "password": password, "name": name},
    )


def login(client, username="u1", password="p1"):
    return client.post(
        "/api/users/login", json={"username": username, "password": password}
    )


def test_register_then_duplicate_conflicts(client):
    resp = register(client)
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json() == {"username": "u1", "name": "User One"}

    again = register(client)
    assert again.status_code == status.HTTP_409_CONFLICT
    assert again.json()["detail"] == "Username already exists"


def test_register_rejects_invalid_payload(client):
    resp = client.post("/api/users", json={"username": "", "password": "", "name": ""})
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert isinstance(resp.json()["detail"], list)


def test_login_returns_token(client):
    register(client)
    resp = login(client)
    assert resp.status_code == status.HTTP_200_OK
    body = resp.json()
    assert body["username"] == "u1"
    assert body["name"] == "User One"
    assert body["token"]


def test_login_failures_are_indistinguishable(client):
    register(client)
    wrong_password = login(client, password="nope")
    unknown_user = login(client, username="ghost")

    assert wrong_password.status_code == status.HTTP_401_UNAUTHORIZED
    assert unknown_user.status_code == status.HTTP_401_UNAUTHORIZED
    assert wrong_password.json() == unknown_user.json()


def test_get_current_user(client):
    register(client)
    token = login(client).json()["token"]

    resp = client.get("/api/users/current", headers={"Authorization": token})
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json() == {"username": "u1", "name": "User One"}


def test_update_password_only_keeps_name(client):
    register(client)
    token = login(client).json()["token"]

    resp = client.patch(
        "/api/users/current",
        json={"password": "p2"},
        headers={"Authorization": token},
    )
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json() == {"username": "u1", "name": "User One"}

    assert login(client, password="p1").status_code == status.HTTP_401_UNAUTHORIZED
    assert login(client, password="p2").status_code == status.HTTP_200_OK


def test_update_name(client):
    register(client)
    token = login(client).json()["token"]

    resp = client.patch(
        "/api/users/current",
        json={"name": "Renamed"},
        headers={"Authorization": token},
    )
    assert resp.json()["name"] == "Renamed"
    assert login(client).status_code == status.HTTP_200_OK


def test_logout_returns_profile(client):
    register(client)
    token = login(client).json()["token"]

    resp = client.delete("/api/users/current", headers={"Authorization": token})
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json() == {"username": "u1", "name": "User One"}


def test_login_is_rate_limited(client, monkeypatch):
    register(client)
    monkeypatch.setattr(users.rate_limit, "times", 1)

    assert login(client).status_code == status.HTTP_200_OK
    assert login(client).status_code == status.HTTP_429_TOO_MANY_REQUESTS
