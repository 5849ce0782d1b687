"""Data retention: deletes form sessions older than each form's retention window."""

import asyncio
import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import SessionLocal
from app.models.form import Form
from app.models.form_session import FormSession

logger = logging.getLogger(__name__)


def purge_expired_sessions(db: Session, now: datetime | None = None) -> int:
    """Delete sessions (and their responses) past the retention window of their form.

    Only forms with auto-delete enabled and a positive ``data_retention_days``
    are considered. Returns the number of sessions deleted.
    """
    now = now or datetime.now(timezone.utc)
    # Session timestamps are stored as naive UTC
    now = now.astimezone(timezone.utc).replace(tzinfo=None)

    forms = (
        db.execute(
            select(Form).where(
                Form.is_auto_delete_enabled.is_(True),
                Form.data_retention_days > 0,
            )
        )
        .scalars()
        .all()
    )

    purged = 0
    for form in forms:
        cutoff = now - timedelta(days=form.data_retention_days)
        expired = (
            db.execute(
                select(FormSession).where(
                    FormSession.form_id == form.id,
                    FormSession.created_at < cutoff,
                )
            )
            .scalars()
            .all()
        )
        for session in expired:
            db.delete(session)
        if expired:
            logger.info(
                "Purged %d session(s) older than %d day(s) from form %s",
                len(expired),
                form.data_retention_days,
                form.uuid,
            )
        purged += len(expired)

    db.commit()
    return purged


async def retention_loop() -> None:
    """Background loop that purges expired sessions every RETENTION_POLL_INTERVAL_SECONDS."""
    interval = settings.RETENTION_POLL_INTERVAL_SECONDS
    logger.info("Retention purge started (poll interval: %ds)", interval)

    while True:
        try:
            db = SessionLocal()
            try:
                count = purge_expired_sessions(db)
                if count > 0:
                    logger.info("Retention purge removed %d session(s)", count)
            finally:
                db.close()
        except Exception:
            logger.exception("Error in retention loop")

        await asyncio.sleep(interval)
