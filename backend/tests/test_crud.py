from __future__ import annotations

from leaderboard import crud
from leaderboard.ranking import WatchtimeRecord


def test_upsert_creates_then_replaces(db) -> None:
    crud.upsert_record(db, "alice", 120)
    db.commit()

    rec = crud.upsert_record(db, "alice", 45)
    db.commit()

    assert rec == WatchtimeRecord("alice", 45)
    assert crud.get_record(db, "alice") == WatchtimeRecord("alice", 45)
    assert len(crud.list_records(db)) == 1


def test_list_records_orders_by_user_id(db) -> None:
    for user_id, watchtime in [("carol", 5), ("alice", 5), ("bob", 9)]:
        crud.upsert_record(db, user_id, watchtime)
    db.commit()

    assert [r.user_id for r in crud.list_records(db)] == ["alice", "bob", "carol"]


def test_get_record_missing_returns_none(db) -> None:
    assert crud.get_record(db, "ghost") is None


def test_delete_record_reports_whether_row_existed(db) -> None:
    crud.upsert_record(db, "alice", 1)
    db.commit()

    assert crud.delete_record(db, "alice") is True
    db.commit()
    assert crud.delete_record(db, "alice") is False
    assert crud.list_records(db) == []


def test_large_watchtime_round_trips(db) -> None:
    big = 2**62 + 7
    crud.upsert_record(db, "binge", big)
    db.commit()

    assert crud.get_record(db, "binge").total_watchtime == big


def test_overlapping_upserts_for_new_user(session_factory) -> None:
    first = session_factory()
    second = session_factory()
    try:
        assert crud.get_record(first, "new") is None
        assert crud.get_record(second, "new") is None

        crud.upsert_record(first, "new", 10)
        crud.upsert_record(second, "new", 25)
        first.commit()
        second.commit()
    finally:
        first.close()
        second.close()

    check = session_factory()
    try:
        assert crud.list_records(check) == [WatchtimeRecord("new", 25)]
    finally:
        check.close()


def test_upsert_refreshes_loaded_row(db) -> None:
    crud.upsert_record(db, "alice", 5)
    db.commit()
    assert crud.get_record(db, "alice").total_watchtime == 5

    rec = crud.upsert_record(db, "alice", 9)

    assert rec.total_watchtime == 9
    assert crud.get_record(db, "alice").total_watchtime == 9
