# cortexgate/tests/conftest.py
import json
import pytest


@pytest.fixture()
def dirs(tmp_path, monkeypatch):
    # Redireciona inbox, second brain e estáticos para diretórios temporários
    from cortexgate.config import settings as settings_mod

    inbox = tmp_path / "dashboard-inbox"
    brain = tmp_path / "second-brain"
    static = tmp_path / "web"
    inbox.mkdir()
    static.mkdir()
    (static / "index.html").write_text("<h1>CortexGate</h1>", encoding="utf-8")

    monkeypatch.setenv("INBOX_DIR", str(inbox))
    monkeypatch.setenv("SECOND_BRAIN_DIR", str(brain))
    monkeypatch.setenv("STATIC_DIR", str(static))
    settings_mod.reset_settings()
    yield {"inbox": inbox, "brain": brain, "static": static}
    settings_mod.reset_settings()


@pytest.fixture()
def write_item(dirs):
    def _write(filename, item=None, text=None):
        path = dirs["inbox"] / filename
        if text is None:
            text = json.dumps(item, ensure_ascii=False, indent=2)
        path.write_text(text, encoding="utf-8")
        return path
    return _write


def make_item(item_id="item-1", source="newsletter", **extra):
    item = {
        "id": item_id,
        "source": source,
        "title": f"Title {item_id}",
        "summary": "Short summary.",
        "created_at": "2024-03-05T10:00:00Z",
    }
    item.update(extra)
    return item


@pytest.fixture()
def client(dirs):
    from fastapi.testclient import TestClient
    from cortexgate.api.main import app
    with TestClient(app) as c:
        yield c


@pytest.fixture(name="make_item")
def make_item_fixture():
    return make_item
