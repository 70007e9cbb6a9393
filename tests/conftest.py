import pytest

from league_history.main import app
from league_history.store import SeasonStore, get_store

ROSTER = [
    {"id": "alpha", "display_name": "Alphas", "owner_name": "Ann"},
    {"id": "beta", "display_name": "Betas", "owner_name": "Ben"},
    {"id": "gamma", "display_name": "Gammas", "owner_name": "Cal"},
    {"id": "delta", "display_name": "Deltas", "owner_name": "Dee"},
]


@pytest.fixture()
def store(tmp_path):
    # Fresh JSON file per test
    return SeasonStore(tmp_path / "seasons.json")


@pytest.fixture()
def client(store):
    # Override app store dependency to use the per-test file
    app.dependency_overrides[get_store] = lambda: store

    from starlette.testclient import TestClient

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture()
def season_2023(client):
    r = client.post("/api/seasons/2023", json={"teams": ROSTER})
    assert r.status_code == 200, r.text
    return "2023"
