# backend/leaderboard/crud.py
from sqlalchemy.orm import Session
from sqlalchemy import delete, text
from typing import List, Optional
from . import models
from .ranking import WatchtimeRecord

def _to_record(row: models.TimeRecord) -> WatchtimeRecord:
    return WatchtimeRecord(user_id=row.user_id, total_watchtime=int(row.total_watchtime or 0))

def list_records(db: Session) -> List[WatchtimeRecord]:
    # ordered by id so equal watchtimes rank deterministically
    rows = db.query(models.TimeRecord).order_by(models.TimeRecord.user_id.asc()).all()
    return [_to_record(r) for r in rows]

def get_record(db: Session, user_id: str) -> Optional[WatchtimeRecord]:
    row = db.get(models.TimeRecord, user_id)
    if not row:
        return None
    return _to_record(row)

def upsert_record(db: Session, user_id: str, total_watchtime: int) -> WatchtimeRecord:
    # full replace, reported totals are cumulative
    stmt = text(f"""
        INSERT INTO {models.TimeRecord.__tablename__} (user_id, total_watchtime)
        VALUES (:uid, :val)
        ON CONFLICT (user_id)
        DO UPDATE SET total_watchtime = EXCLUDED.total_watchtime
    """)
    db.execute(stmt, {"uid": user_id, "val": int(total_watchtime)})
    row = db.get(models.TimeRecord, user_id, populate_existing=True)
    return _to_record(row)

def delete_record(db: Session, user_id: str) -> bool:
    result = db.execute(delete(models.TimeRecord).where(models.TimeRecord.user_id == user_id))
    return (result.rowcount or 0) > 0
