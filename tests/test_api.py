import pytest
from fastapi.testclient import TestClient

from pg_toolset_core.api import app
from conftest import install_postgres


@pytest.fixture
def client():
    return TestClient(app)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_toolset(client, tmp_path, monkeypatch):
    bindir, pg_config = install_postgres(tmp_path)
    monkeypatch.setenv("PATH", str(tmp_path / "empty"))
    monkeypatch.setenv("PG_CONFIG", str(pg_config))

    response = client.get("/toolset")

    assert response.status_code == 200
    body = response.json()
    assert body["psql"] == str(bindir / "psql")
    assert body["pg_version"] == "14.9"
    assert body["source"] == "pg_config_env"


def test_ambiguous_toolset(client, tmp_path, monkeypatch):
    _, pg_config_14 = install_postgres(tmp_path / "a", version="14.9", major="14")
    _, pg_config_15 = install_postgres(tmp_path / "b", version="15.6", major="15")
    monkeypatch.setenv("PATH", f"{pg_config_14.parent}:{pg_config_15.parent}")
    monkeypatch.delenv("PG_CONFIG", raising=False)

    response = client.get("/toolset")

    assert response.status_code == 503
    body = response.json()
    assert body["error"] == "AmbiguousConfigurationError"
    assert body["candidates"] == [str(pg_config_14), str(pg_config_15)]
    assert body["versions"] == {str(pg_config_14): "14.9", str(pg_config_15): "15.6"}


def test_no_toolset(client, tmp_path, monkeypatch):
    monkeypatch.setenv("PATH", str(tmp_path))
    monkeypatch.delenv("PG_CONFIG", raising=False)

    response = client.get("/toolset")

    assert response.status_code == 503
    assert response.json()["error"] == "NotFoundError"


def test_unknown_endpoint(client):
    response = client.get("/nope")
    assert response.status_code == 404
    assert response.json()["path"] == "/nope"
