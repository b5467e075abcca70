from fastapi.testclient import TestClient


def test_health(client: TestClient):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json() == {"message": "Healthy"}


def test_save_note_end_to_end(client: TestClient):
    r = client.put("/notes/2024-01-01", json={"content": "hello world"})
    assert r.status_code == 200
    first = r.json()
    assert first["wordCount"] == 2
    assert first["date"] == "2024-01-01"
    assert set(first) == {"id", "date", "content", "wordCount", "createdAt", "updatedAt"}

    r = client.put("/notes/2024-01-01", json={"content": "hello"})
    second = r.json()
    assert second["id"] == first["id"]
    assert second["createdAt"] == first["createdAt"]
    assert second["wordCount"] == 1

    r = client.get("/notes")
    assert r.status_code == 200
    [meta] = r.json()
    assert meta["preview"] == "hello"
    assert "content" not in meta
    assert set(meta) == {"id", "date", "wordCount", "preview", "updatedAt"}


def test_get_missing_note_is_null(client: TestClient):
    r = client.get("/notes/2020-02-02")
    assert r.status_code == 200
    assert r.json() is None


def test_delete_note(client: TestClient):
    client.put("/notes/2024-01-01", json={"content": "bye"})
    r = client.delete("/notes/2024-01-01")
    assert r.status_code == 204
    assert client.get("/notes/2024-01-01").json() is None
    # deleting again is still fine
    assert client.delete("/notes/2024-01-01").status_code == 204


def test_search_route(client: TestClient):
    client.put("/notes/2024-01-01", json={"content": "coffee with Sam"})
    client.put("/notes/2024-01-02", json={"content": "tea alone"})
    client.put("/notes/2024-01-03", json={"content": "more coffee"})

    r = client.get("/notes/search", params={"q": "coffee"})
    assert r.status_code == 200
    assert [n["date"] for n in r.json()] == ["2024-01-03", "2024-01-01"]


def test_search_requires_query(client: TestClient):
    assert client.get("/notes/search").status_code == 422


def test_user_lifecycle(client: TestClient):
    r = client.post("/users", json={"email": "ada@example.com", "name": "Ada"})
    assert r.status_code == 201
    user = r.json()
    assert set(user) == {"id", "email", "name", "createdAt", "updatedAt"}

    r = client.get(f"/users/{user['id']}")
    assert r.status_code == 200
    assert r.json() == user

    r = client.patch(f"/users/{user['id']}", json={"name": "Ada Lovelace"})
    assert r.status_code == 200
    assert r.json()["name"] == "Ada Lovelace"
    assert r.json()["email"] == "ada@example.com"

    r = client.patch(f"/users/{user['id']}", json={"email": "lovelace@example.com"})
    assert r.json()["email"] == "lovelace@example.com"
    assert r.json()["name"] == "Ada Lovelace"


def test_get_missing_user_is_404(client: TestClient):
    r = client.get("/users/nope")
    assert r.status_code == 404
    assert r.json() == {"message": "User not found: nope", "code": "NOT_FOUND"}


def test_duplicate_user_hides_storage_detail(client: TestClient):
    client.post("/users", json={"email": "ada@example.com", "name": "Ada"})
    r = client.post("/users", json={"email": "ada@example.com", "name": "Ada"})
    assert r.status_code == 500
    body = r.json()
    assert body["code"] == "DATABASE_ERROR"
    assert "UNIQUE" not in body["message"]
    assert "users" not in body["message"]


def test_invalid_email_rejected(client: TestClient):
    r = client.post("/users", json={"email": "not-an-email", "name": "X"})
    assert r.status_code == 422


def test_email_is_stored_normalized(client: TestClient):
    r = client.post("/users", json={"email": "ada@Example.COM", "name": "Ada"})
    assert r.status_code == 201
    assert r.json()["email"] == "ada@example.com"

    # the uniqueness check sees the normalized form too
    r = client.post("/users", json={"email": "ada@EXAMPLE.com", "name": "Ada"})
    assert r.status_code == 500
    assert r.json()["code"] == "DATABASE_ERROR"
