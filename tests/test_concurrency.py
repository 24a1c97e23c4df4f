import threading
from concurrent.futures import ThreadPoolExecutor

from rating_platform.db.database import get_db
from rating_platform.services.rating_service import RatingService

from conftest import principal_of

WORKERS = 16


def _submit_all(principal, store_id, values):
    barrier = threading.Barrier(len(values))

    def submit(value):
        barrier.wait()
        with get_db() as conn:
            return RatingService(conn).submit_rating(principal, store_id, value)

    with ThreadPoolExecutor(max_workers=len(values)) as pool:
        return list(pool.map(submit, values))


def test_concurrent_submissions_for_one_key_leave_one_row(db_path, make_user, make_store):
    rater = make_user()
    store = make_store()
    values = [(i % 5) + 1 for i in range(WORKERS)]

    results = _submit_all(principal_of(rater), store.id, values)

    with get_db() as conn:
        rows = conn.execute(
            "SELECT id, value FROM ratings WHERE user_id = ? AND store_id = ?",
            (rater.id, store.id),
        ).fetchall()
    assert len(rows) == 1
    assert {r.id for r in results} == {rows[0]["id"]}
    assert rows[0]["value"] in set(values)


def test_concurrent_submissions_for_different_keys_all_land(db_path, make_user, make_store):
    store = make_store()
    raters = [make_user() for _ in range(8)]
    barrier = threading.Barrier(len(raters))

    def submit(rater):
        barrier.wait()
        with get_db() as conn:
            return RatingService(conn).submit_rating(principal_of(rater), store.id, 4)

    with ThreadPoolExecutor(max_workers=len(raters)) as pool:
        list(pool.map(submit, raters))

    with get_db() as conn:
        aggregate = RatingService(conn).get_aggregate(store.id)
    assert aggregate.total_ratings == 8
    assert aggregate.average_rating == 4.0
