from fastapi import status

from contactbook import crud
from contactbook.auth import get_password_hash


def create_logged_in_user(client, db_session, username="owner"):
    crud.create_user(db_session, username, username.title(), get_password_hash("secret"))
    resp = client.post(
        "/api/users/login", json={"username": username, "password": "secret"}
    )
    return {"Authorization": resp.json()["token"]}


def create_contact(client, headers, first_name="Jane"):
    resp = client.post("/api/contacts", json={"first_name": first_name}, headers=headers)
    assert resp.status_code == status.HTTP_200_OK
    return resp.json()["id"]


ADDRESS = {
    "street": "Jalan Merdeka 1",
    "city": "Jakarta",
    "province": "DKI",
    "country": "ID",
    "postal_code": "12345",
}


def test_register_login_contact_address_scenario(client):
    register = client.post(
        "/api/users", json={"username": "u1", "password": "p1", "name": "User One"}
    )
    assert register.json() == {"username": "u1", "name": "User One"}
    duplicate = client.post(
        "/api/users", json={"username": "u1", "password": "p1", "name": "User One"}
    )
    assert duplicate.status_code == status.HTTP_409_CONFLICT

    token = client.post(
        "/api/users/login", json={"username": "u1", "password": "p1"}
    ).json()["token"]
    assert token
    headers = {"Authorization": token}

    contact_id = create_contact(client, headers)
    created = client.post(
        f"/api/contacts/{contact_id}/addresses",
        json={"country": "ID", "postal_code": "12345"},
        headers=headers,
    )
    assert created.status_code == status.HTTP_200_OK
    assert "contact_id" not in created.json()

    listed = client.get(f"/api/contacts/{contact_id}/addresses", headers=headers)
    assert listed.status_code == status.HTTP_200_OK
    assert listed.json() == [created.json()]


def test_get_update_remove_address(client, db_session):
    headers = create_logged_in_user(client, db_session)
    contact_id = create_contact(client, headers)
    address = client.post(
        f"/api/contacts/{contact_id}/addresses", json=ADDRESS, headers=headers
    ).json()
    url = f"/api/contacts/{contact_id}/addresses/{address['id']}"

    assert client.get(url, headers=headers).json() == address

    updated = client.put(
        url, json={"country": "SG", "postal_code": "999"}, headers=headers
    )
    assert updated.status_code == status.HTTP_200_OK
    assert updated.json() == {**address, "country": "SG", "postal_code": "999"}

    removed = client.delete(url, headers=headers)
    assert removed.status_code == status.HTTP_200_OK
    assert removed.json() == updated.json()
    assert client.get(url, headers=headers).status_code == status.HTTP_404_NOT_FOUND


def test_address_validation(client, db_session):
    headers = create_logged_in_user(client, db_session)
    contact_id = create_contact(client, headers)

    resp = client.post(
        f"/api/contacts/{contact_id}/addresses",
        json={"country": "ID", "postal_code": "12345678901"},
        headers=headers,
    )
    assert resp.status_code == status.HTTP_400_BAD_REQUEST

    resp = client.post(
        f"/api/contacts/{contact_id}/addresses", json={"city": "X"}, headers=headers
    )
    assert resp.status_code == status.HTTP_400_BAD_REQUEST


def test_address_under_foreign_contact_is_not_found(client, db_session):
    owner = create_logged_in_user(client, db_session, "owner")
    intruder = create_logged_in_user(client, db_session, "intruder")
    contact_id = create_contact(client, owner)
    address_id = client.post(
        f"/api/contacts/{contact_id}/addresses", json=ADDRESS, headers=owner
    ).json()["id"]

    create = client.post(
        f"/api/contacts/{contact_id}/addresses", json=ADDRESS, headers=intruder
    )
    assert create.status_code == status.HTTP_404_NOT_FOUND

    base = f"/api/contacts/{contact_id}/addresses"
    assert client.get(base, headers=intruder).status_code == status.HTTP_404_NOT_FOUND
    assert (
        client.get(f"{base}/{address_id}", headers=intruder).status_code
        == status.HTTP_404_NOT_FOUND
    )
    assert (
        client.put(f"{base}/{address_id}", json=ADDRESS, headers=intruder).status_code
        == status.HTTP_404_NOT_FOUND
    )
    assert (
        client.delete(f"{base}/{address_id}", headers=intruder).status_code
        == status.HTTP_404_NOT_FOUND
    )

    owner_view = client.get(f"{base}/{address_id}", headers=owner)
    assert owner_view.status_code == status.HTTP_200_OK
    assert owner_view.json()["street"] == ADDRESS["street"]


def test_address_must_belong_to_contact_in_path(client, db_session):
    headers = create_logged_in_user(client, db_session)
    first = create_contact(client, headers, "First")
    second = create_contact(client, headers, "Second")
    address_id = client.post(
        f"/api/contacts/{first}/addresses", json=ADDRESS, headers=headers
    ).json()["id"]

    resp = client.get(f"/api/contacts/{second}/addresses/{address_id}", headers=headers)
    assert resp.status_code == status.HTTP_404_NOT_FOUND
    assert resp.json()["detail"] == "Address is not found"


def test_removing_contact_removes_addresses(client, db_session):
    headers = create_logged_in_user(client, db_session)
    contact_id = create_contact(client, headers)
    client.post(f"/api/contacts/{contact_id}/addresses", json=ADDRESS, headers=headers)

    client.delete(f"/api/contacts/{contact_id}", headers=headers)

    assert crud.list_addresses(db_session, contact_id) == []


def test_out_of_range_ids_are_rejected(client, db_session):
    headers = create_logged_in_user(client, db_session)
    contact_id = create_contact(client, headers)
    huge = 10**20

    for method, path in [
        ("GET", f"/api/contacts/{huge}/addresses"),
        ("POST", f"/api/contacts/{huge}/addresses"),
        ("GET", f"/api/contacts/{contact_id}/addresses/{huge}"),
        ("PUT", f"/api/contacts/{contact_id}/addresses/{huge}"),
        ("DELETE", f"/api/contacts/{contact_id}/addresses/{huge}"),
    ]:
        resp = client.request(method, path, json=ADDRESS, headers=headers)
        assert resp.status_code == status.HTTP_400_BAD_REQUEST, (method, path)
