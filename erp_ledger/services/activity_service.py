"""
Activity service — the activity stream sink.

The posting engine reports what it did here ("system Posted
Transaction T0001S"). From the engine's point of view this is
fire-and-forget: it does not read activity back.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from erp_ledger.models.activity_record import ActivityRecord

logger = logging.getLogger(__name__)


class ActivityService:
    """Writes and reads the activity stream."""

    def __init__(self, db: Session):
        self.db = db

    def record_activity(
        self,
        actor: str,
        verb: str,
        target_type: str,
        target_id: str,
        target_display: str = "",
    ) -> ActivityRecord:
        record = ActivityRecord(
            actor=actor,
            verb=verb,
            target_type=target_type,
            target_id=str(target_id),
            target_display=target_display,
        )
        self.db.add(record)
        self.db.flush()
        logger.info(
            "%s %s %s %s", actor, verb, target_type, target_display or target_id
        )
        return record

    def get_activity(self, target_id: str | None = None) -> list[ActivityRecord]:
        """Activity records, oldest first, optionally for one target."""
        stmt = select(ActivityRecord).order_by(ActivityRecord.id)
        if target_id is not None:
            stmt = stmt.where(ActivityRecord.target_id == str(target_id))
        return list(self.db.execute(stmt).scalars().all())
