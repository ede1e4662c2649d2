import time

from catalog_api.app.core.security import (
    User,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

FILM_1 = "00000000-0000-0000-0000-000000000001"


def test_password_hash_roundtrip():
    hashed = hash_password("geheim")
    assert verify_password("geheim", hashed)
    assert not verify_password("falsch", hashed)
    assert not verify_password("geheim", "kaputt")


def test_token_roundtrip():
    token = create_access_token({"sub": "admin"}, "secret", 60)
    payload = decode_access_token(token, "secret")
    assert payload["sub"] == "admin"
    assert payload["exp"] >= int(time.time())


def test_token_with_wrong_key_or_expired():
    token = create_access_token({"sub": "admin"}, "secret", 60)
    assert decode_access_token(token, "other") is None
    assert decode_access_token(create_access_token({"sub": "admin"}, "secret", -10), "secret") is None
    assert decode_access_token("not.a.token", "secret") is None


def test_login(client):
    response = client.post("/api/login", json={"username": "admin", "password": "p"})
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["roles"] == ["admin", "mitarbeiter"]


def test_login_with_wrong_password(client):
    response = client.post("/api/login", json={"username": "admin", "password": "x"})
    assert response.status_code == 401


def test_invalid_token(client):
    response = client.delete(f"/api/filme/{FILM_1}", headers={"Authorization": "Bearer abc.def.ghi"})
    assert response.status_code == 401


def test_delete_requires_admin(client):
    client.app.state.users["mitarbeiter"] = User("mitarbeiter", hash_password("m"), ("mitarbeiter",))
    response = client.post("/api/login", json={"username": "mitarbeiter", "password": "m"})
    headers = {"Authorization": f"Bearer {response.json()['access_token']}"}
    assert client.delete(f"/api/filme/{FILM_1}", headers=headers).status_code == 403
    response = client.put(
        f"/api/filme/{FILM_1}",
        json={"titel": "Die nackte Kanone", "art": "DVD", "studio": "Pixar"},
        headers={**headers, "If-Match": '"0"'},
    )
    assert response.status_code == 204
