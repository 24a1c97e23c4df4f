from rating_platform.core.config import settings
from rating_platform.models.user import UserRole

NEW_USER = {
    "name": "Administered Account Person",
    "email": "managed@example.com",
    "address": "77 Admin Avenue",
    "password": "Admin#Made1",
    "role": "store_owner",
}


def test_seeded_admin_can_log_in(client):
    response = client.post(
        "/api/v1/auth/login",
        json={"email": settings.SEED_ADMIN_EMAIL, "password": settings.SEED_ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    assert response.json()["user"]["role"] == "admin"


def test_stats_count_everything(login_as, make_user, make_store):
    admin = make_user(role=UserRole.ADMIN)
    rater = make_user()
    store = make_store()
    make_store()
    login_as(rater).post("/api/v1/ratings", json={"store_id": store.id, "value": 5})

    stats = login_as(admin).get("/api/v1/admin/stats").json()

    # The seeded admin is a user too.
    assert stats == {"total_users": 3, "total_stores": 2, "total_ratings": 1}


def test_rater_cannot_call_admin_operations(login_as, make_user, make_store):
    admin = make_user(role=UserRole.ADMIN)
    rater = make_user()
    store = make_store()
    c = login_as(rater)
    before = login_as(admin).get("/api/v1/admin/stats").json()

    responses = [
        c.get("/api/v1/admin/stats"),
        c.get("/api/v1/admin/users"),
        c.post("/api/v1/admin/users", json=NEW_USER),
        c.put(f"/api/v1/admin/users/{rater.id}/role", json={"role": "admin"}),
        c.delete(f"/api/v1/admin/users/{admin.id}"),
        c.post(
            "/api/v1/admin/stores",
            json={"name": "Sneaky", "email": "s@example.com", "address": "x"},
        ),
        c.delete(f"/api/v1/admin/stores/{store.id}"),
    ]

    assert all(r.status_code == 403 for r in responses)
    assert login_as(admin).get("/api/v1/admin/stats").json() == before
    assert c.get("/api/v1/auth/me").json()["role"] == "rater"


def test_admin_user_lifecycle(login_as, make_user):
    c = login_as(make_user(role=UserRole.ADMIN))

    created = c.post("/api/v1/admin/users", json=NEW_USER)
    assert created.status_code == 201
    user_id = created.json()["id"]
    assert created.json()["role"] == "store_owner"
    assert "hashed_password" not in created.json()

    assert c.post("/api/v1/admin/users", json=NEW_USER).status_code == 409

    owners = c.get("/api/v1/admin/users", params={"role": "store_owner"}).json()
    assert [u["id"] for u in owners] == [user_id]
    found = c.get("/api/v1/admin/users", params={"search": "Admin Avenue"}).json()
    assert [u["id"] for u in found] == [user_id]

    assert c.put(
        f"/api/v1/admin/users/{user_id}/role", json={"role": "superuser"}
    ).status_code == 422
    demoted = c.put(f"/api/v1/admin/users/{user_id}/role", json={"role": "rater"})
    assert demoted.json()["role"] == "rater"

    assert c.delete(f"/api/v1/admin/users/{user_id}").status_code == 204
    assert c.delete(f"/api/v1/admin/users/{user_id}").status_code == 404
    assert c.put(
        f"/api/v1/admin/users/{user_id}/role", json={"role": "rater"}
    ).status_code == 404



def test_user_search_treats_wildcards_literally(login_as, make_user):
    c = login_as(make_user(role=UserRole.ADMIN))
    make_user()
    owner = make_user(role=UserRole.STORE_OWNER)

    found = c.get("/api/v1/admin/users", params={"search": "_"}).json()

    assert [u["id"] for u in found] == [owner.id]
    assert c.get("/api/v1/admin/users", params={"search": "%"}).json() == []


def test_deleted_user_loses_sessions(login_as, make_user):
    admin_client = login_as(make_user(role=UserRole.ADMIN))
    rater = make_user()
    rater_client = login_as(rater)

    admin_client.delete(f"/api/v1/admin/users/{rater.id}")

    assert rater_client.get("/api/v1/auth/me").status_code == 401


def test_admin_store_management(login_as, make_user):
    c = login_as(make_user(role=UserRole.ADMIN))
    owner = make_user(role=UserRole.STORE_OWNER)
    rater = make_user()

    not_owner = c.post(
        "/api/v1/admin/stores",
        json={"name": "Fruit Stand", "email": "fruit@example.com",
              "address": "3 Orchard Way", "owner_id": rater.id},
    )
    assert not_owner.status_code == 422
    unknown_owner = c.post(
        "/api/v1/admin/stores",
        json={"name": "Fruit Stand", "email": "fruit@example.com",
              "address": "3 Orchard Way", "owner_id": "missing"},
    )
    assert unknown_owner.status_code == 404

    created = c.post(
        "/api/v1/admin/stores",
        json={"name": "Fruit Stand", "email": "fruit@example.com",
              "address": "3 Orchard Way", "owner_id": owner.id},
    )
    assert created.status_code == 201
    store_id = created.json()["id"]

    renamed = c.put(f"/api/v1/admin/stores/{store_id}", json={"name": "Fruit Market"})
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "Fruit Market"
    assert renamed.json()["owner_id"] == owner.id
    assert c.put(f"/api/v1/admin/stores/{store_id}", json={"name": None}).status_code == 422
    assert c.put("/api/v1/admin/stores/9999", json={"name": "X"}).status_code == 404


def test_deleting_store_removes_its_ratings(login_as, make_user, make_store):
    owner = make_user(role=UserRole.STORE_OWNER)
    store = make_store(owner=owner)
    for rater in (make_user(), make_user()):
        login_as(rater).post("/api/v1/ratings", json={"store_id": store.id, "value": 4})
    admin_client = login_as(make_user(role=UserRole.ADMIN))

    assert admin_client.delete(f"/api/v1/admin/stores/{store.id}").status_code == 204

    assert admin_client.get("/api/v1/admin/stats").json()["total_ratings"] == 0
    assert login_as(owner).get(
        f"/api/v1/store-owner/stores/{store.id}/ratings"
    ).status_code == 403
    assert admin_client.delete(f"/api/v1/admin/stores/{store.id}").status_code == 404
