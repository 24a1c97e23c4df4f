import sqlite3
from contextlib import closing

from rating_platform.core.config import settings
from rating_platform.db import database
from rating_platform.models.user import UserRole
from rating_platform.services.stats_service import StatsService


def test_rater_submits_and_resubmits(login_as, make_user, make_store):
    rater = make_user()
    store = make_store()
    c = login_as(rater)

    first = c.post("/api/v1/ratings", json={"store_id": store.id, "value": 3})
    second = c.post("/api/v1/ratings", json={"store_id": store.id, "value": 5})

    assert first.status_code == second.status_code == 200
    assert first.json()["id"] == second.json()["id"]
    assert second.json()["value"] == 5
    mine = c.get(f"/api/v1/ratings/{store.id}/mine")
    assert mine.json()["value"] == 5

    stores = c.get("/api/v1/stores").json()
    assert stores == [
        {
            **stores[0],
            "id": store.id,
            "average_rating": 5.0,
            "total_ratings": 1,
            "user_rating": 5,
        }
    ]


def test_my_rating_is_null_before_rating(login_as, make_user, make_store):
    store = make_store()
    c = login_as(make_user())

    response = c.get(f"/api/v1/ratings/{store.id}/mine")

    assert response.status_code == 200
    assert response.json() is None


def test_store_list_aggregates_and_filters(login_as, make_user, make_store):
    bakery = make_store(name="Corner Bakery", address="5 Baker Lane")
    make_store(name="Hardware Depot", address="9 Nail Road")
    raters = [make_user() for _ in range(3)]
    for rater, value in zip(raters, (4, 5, 3)):
        login_as(rater).post("/api/v1/ratings", json={"store_id": bakery.id, "value": value})
    owner_client = login_as(make_user(role=UserRole.STORE_OWNER))

    listing = owner_client.get("/api/v1/stores").json()
    by_name = {s["name"]: s for s in listing}
    assert by_name["Corner Bakery"]["average_rating"] == 4.0
    assert by_name["Corner Bakery"]["total_ratings"] == 3
    assert by_name["Corner Bakery"]["user_rating"] is None
    assert by_name["Hardware Depot"]["average_rating"] == 0.0
    assert by_name["Hardware Depot"]["total_ratings"] == 0

    assert [s["name"] for s in owner_client.get(
        "/api/v1/stores", params={"search": "bake"}
    ).json()] == ["Corner Bakery"]
    assert [s["name"] for s in owner_client.get(
        "/api/v1/stores", params={"address": "nail"}
    ).json()] == ["Hardware Depot"]


def test_stores_require_a_session(client):
    assert client.get("/api/v1/stores").status_code == 401


def test_only_raters_can_rate(login_as, make_user, make_store):
    store = make_store()
    for role in (UserRole.ADMIN, UserRole.STORE_OWNER):
        c = login_as(make_user(role=role))
        response = c.post("/api/v1/ratings", json={"store_id": store.id, "value": 4})
        assert response.status_code == 403


def test_rating_validation_and_missing_store(login_as, make_user, make_store):
    store = make_store()
    c = login_as(make_user())

    for bad in (0, 6, 4.5, "4"):
        response = c.post("/api/v1/ratings", json={"store_id": store.id, "value": bad})
        assert response.status_code == 422, bad

    missing = c.post("/api/v1/ratings", json={"store_id": store.id + 100, "value": 4})
    assert missing.status_code == 404


def test_owner_sees_only_own_store_ratings(login_as, make_user, make_store):
    owner_a = make_user(role=UserRole.STORE_OWNER)
    owner_b = make_user(role=UserRole.STORE_OWNER)
    store_a = make_store(owner=owner_a)
    store_b = make_store(owner=owner_b)
    rater = make_user()
    login_as(rater).post("/api/v1/ratings", json={"store_id": store_b.id, "value": 2})
    client_a = login_as(owner_a)
    client_b = login_as(owner_b)

    assert [s["id"] for s in client_a.get("/api/v1/store-owner/stores").json()] == [store_a.id]

    denied = client_a.get(f"/api/v1/store-owner/stores/{store_b.id}/ratings")
    missing = client_a.get("/api/v1/store-owner/stores/9999/ratings")
    assert denied.status_code == missing.status_code == 403
    assert denied.json() == missing.json()

    allowed = client_b.get(f"/api/v1/store-owner/stores/{store_b.id}/ratings")
    assert allowed.status_code == 200
    body = allowed.json()
    assert body["stats"] == {"average_rating": 2.0, "total_ratings": 1}
    assert body["ratings"][0]["user"] == {
        "id": rater.id,
        "name": rater.name,
        "email": rater.email,
    }


def test_raters_cannot_use_owner_endpoints(login_as, make_user, make_store):
    rater = make_user()
    store = make_store()
    c = login_as(rater)

    assert c.get("/api/v1/store-owner/stores").status_code == 403
    assert c.get(f"/api/v1/store-owner/stores/{store.id}/ratings").status_code == 403


def test_database_failure_is_reported_as_internal_error(login_as, make_user, monkeypatch):
    def broken(self):
        raise sqlite3.OperationalError("disk I/O error at /secret/path")

    monkeypatch.setattr(StatsService, "dashboard", broken)
    c = login_as(make_user(role=UserRole.ADMIN))

    response = c.get("/api/v1/admin/stats")

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
    assert settings.SESSION_COOKIE_NAME not in response.text


class _CommitFails:
    """Connection wrapper whose commit always fails."""

    def __init__(self, conn):
        self._conn = conn

    def __getattr__(self, name):
        return getattr(self._conn, name)

    def commit(self):
        raise sqlite3.OperationalError("database is locked")


def test_failed_commit_is_internal_error_and_saves_nothing(
    login_as, make_user, make_store, db_path, monkeypatch
):
    store = make_store()
    c = login_as(make_user())
    real_connection = database.get_connection
    monkeypatch.setattr(
        database, "get_connection", lambda: _CommitFails(real_connection())
    )

    response = c.post("/api/v1/ratings", json={"store_id": store.id, "value": 4})

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
    with closing(sqlite3.connect(db_path)) as check:
        assert check.execute("SELECT COUNT(*) FROM ratings").fetchone()[0] == 0


def test_search_treats_wildcards_literally(login_as, make_user, make_store):
    make_store(name="Half_Price 50% Outlet", address="1 Percent Plaza")
    make_store(name="Harbor Fish Market", address="12 Dock Street")
    c = login_as(make_user())

    def names(**params):
        return [s["name"] for s in c.get("/api/v1/stores", params=params).json()]

    assert names(search="%") == ["Half_Price 50% Outlet"]
    assert names(search="f_p") == ["Half_Price 50% Outlet"]
    assert names(search="H_r") == []
    assert names(address="_") == []
