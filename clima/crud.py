"""
CRUD functions for the city history.

Only "create" exists: the history is an audit trail that this system never
reads back, edits or deletes.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from . import models

logger = logging.getLogger(__name__)


def record_city(db: Session, ciudad: Optional[str]) -> models.HistoryRecord:
    """
    CREATE record:
    - no deduplication, repeated cities get repeated rows
    - on failure the session is rolled back and the error propagates
    """
    record = models.HistoryRecord(ciudad=ciudad, created_at=datetime.utcnow())

    db.add(record)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(record)

    logger.info("Ciudad guardada en el historial: %r (id=%s)", record.ciudad, record.id)
    return record

