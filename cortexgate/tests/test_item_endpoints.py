# cortexgate/tests/test_item_endpoints.py
import os


def test_list_items(client, write_item, make_item):
    write_item("a.json", make_item("a", sections=[{"heading": "H", "items": ["x"]}]))
    write_item("b.json", make_item("b", source="youtube", metadata={"video_url": "https://yt/b"}))
    write_item("broken.json", text="{oops")

    r = client.get("/api/items")
    assert r.status_code == 200
    data = r.json()
    assert sorted(d["id"] for d in data) == ["a", "b"]
    by_id = {d["id"]: d for d in data}
    assert by_id["a"]["sections"] == [{"heading": "H", "items": ["x"]}]
    assert by_id["b"]["metadata"] == {"video_url": "https://yt/b"}
    assert "content" not in by_id["a"]


def test_list_items_empty_inbox(client):
    r = client.get("/api/items")
    assert r.status_code == 200
    assert r.json() == []


def test_list_items_failure(client, dirs):
    dirs["inbox"].rmdir()
    dirs["inbox"].write_text("not a directory", encoding="utf-8")
    r = client.get("/api/items")
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to list items"}


def test_save_item(client, dirs, write_item, make_item, monkeypatch):
    monkeypatch.setenv("HOME", str(dirs["brain"].parent))
    src = write_item("a.json", make_item("a", source="website", title="Über KI & Produktivität!"))

    r = client.post("/api/save/a")
    assert r.status_code == 200
    j = r.json()
    assert j["success"] is True
    assert j["saved_to"] == os.path.join(
        "~", "second-brain", "3-resources", "articles", "2024-03-05-ueber-ki-produktivitaet.md"
    )
    assert not src.exists()
    saved = dirs["brain"] / "3-resources" / "articles" / "2024-03-05-ueber-ki-produktivitaet.md"
    assert saved.read_text(encoding="utf-8").startswith("---\ntype: website-summary\n")

    r = client.get("/api/items")
    assert r.json() == []


def test_save_unknown_item(client, dirs, write_item, make_item):
    src = write_item("a.json", make_item("a"))
    r = client.post("/api/save/missing")
    assert r.status_code == 404
    assert r.json() == {"error": "Item not found"}
    assert src.exists()
    assert not dirs["brain"].exists()


def test_save_io_failure(client, dirs, write_item, make_item):
    src = write_item("a.json", make_item("a"))
    dirs["brain"].write_text("not a directory", encoding="utf-8")
    r = client.post("/api/save/a")
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to save item"}
    assert src.exists()


def test_dismiss_item(client, dirs, write_item, make_item):
    src = write_item("a.json", make_item("a"))
    write_item("b.json", make_item("b"))

    r = client.delete("/api/dismiss/a")
    assert r.status_code == 200
    assert r.json() == {"success": True}
    assert not src.exists()
    assert not dirs["brain"].exists()
    assert [d["id"] for d in client.get("/api/items").json()] == ["b"]

    # dismiss de novo -> 404
    r = client.delete("/api/dismiss/a")
    assert r.status_code == 404
    assert r.json() == {"error": "Item not found"}


def test_dismiss_io_failure(client, write_item, make_item, monkeypatch):
    write_item("a.json", make_item("a"))
    from cortexgate.archiver import archive_service

    def fail_delete(path):
        raise PermissionError(path)
    monkeypatch.setattr(archive_service, "delete_item_file", fail_delete)

    r = client.delete("/api/dismiss/a")
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to dismiss item"}


def test_unexpected_error_returns_generic_500(dirs, monkeypatch):
    from fastapi.testclient import TestClient
    from cortexgate.api import main as api_main

    def boom(item_id):
        raise RuntimeError("boom")
    monkeypatch.setattr(api_main, "archive_item", boom)

    with TestClient(api_main.app, raise_server_exceptions=False) as c:
        r = c.post("/api/save/a")
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}


def test_list_items_returns_fields_as_written(client, write_item):
    write_item("a.json", {"id": "a", "source": "website", "title": "T", "priority": 2})
    data = client.get("/api/items").json()
    assert data == [{"id": "a", "source": "website", "title": "T", "priority": 2}]


def test_unrouted_method_uses_error_body(client):
    r = client.post("/api/save/")
    assert r.status_code == 405
    assert r.json() == {"error": "Method Not Allowed"}
