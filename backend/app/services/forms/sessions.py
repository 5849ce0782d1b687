"""Session aggregation: visitor sessions, completions and completion rate.

Counts are scoped to a form through its block ids: a session belongs to the
form when at least one of its responses references one of the form's blocks.
Values are recomputed on every call and never stored.
"""

import logging
from collections.abc import Collection
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.form import Form
from app.models.form_block import FormBlock
from app.models.form_block_interaction import FormBlockInteraction
from app.models.form_session import FormSession
from app.models.form_session_response import FormSessionResponse
from app.schemas.forms import FormMetrics
from app.services.forms.exceptions import BlockNotFound, SessionAlreadyCompleted, SessionNotFound

logger = logging.getLogger(__name__)

_TWO_PLACES = Decimal("0.01")


# ---------------------------------------------------------------------------
# Counting
# ---------------------------------------------------------------------------


def count_distinct_sessions(db: Session, block_ids: Collection[int]) -> int:
    """Number of distinct sessions with a response to any of ``block_ids``."""
    if not block_ids:
        return 0
    return db.execute(
        select(func.count(func.distinct(FormSessionResponse.form_session_id))).where(
            FormSessionResponse.form_block_id.in_(block_ids)
        )
    ).scalar_one()


def count_completed_sessions(db: Session, block_ids: Collection[int]) -> int:
    """Sessions flagged completed among those that answered any of ``block_ids``."""
    if not block_ids:
        return 0
    return db.execute(
        select(func.count(func.distinct(FormSession.id)))
        .select_from(FormSession)
        .join(FormSessionResponse, FormSessionResponse.form_session_id == FormSession.id)
        .where(
            FormSessionResponse.form_block_id.in_(block_ids),
            FormSession.is_completed.is_(True),
        )
    ).scalar_one()


def _month_bounds(now: datetime) -> tuple[datetime, datetime]:
    # Response timestamps are stored as naive UTC
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc).replace(tzinfo=None)
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def count_sessions_in_month(db: Session, block_ids: Collection[int], now: datetime) -> int:
    """Distinct sessions whose responses were created in the calendar month of ``now``."""
    if not block_ids:
        return 0
    start, end = _month_bounds(now)
    return db.execute(
        select(func.count(func.distinct(FormSessionResponse.form_session_id))).where(
            FormSessionResponse.form_block_id.in_(block_ids),
            FormSessionResponse.created_at >= start,
            FormSessionResponse.created_at < end,
        )
    ).scalar_one()


def completion_rate(total, completed) -> float:
    """Percentage of completed sessions, rounded half-up to two decimals.

    Never raises: zero totals and unusable input yield 0.
    """
    try:
        rate = Decimal(completed) / Decimal(total) * 100
        if not rate.is_finite():
            raise ValueError(rate)
        return float(rate.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))
    except Exception:
        logger.debug("Completion rate unavailable (total=%r, completed=%r)", total, completed)
        return 0.0


def get_form_metrics(db: Session, form: Form, now: datetime | None = None) -> FormMetrics:
    now = now or datetime.now(timezone.utc)
    block_ids = [block.id for block in form.blocks]

    total = count_distinct_sessions(db, block_ids)
    completed = count_completed_sessions(db, block_ids)

    return FormMetrics(
        total_sessions=total,
        completed_sessions=completed,
        completion_rate=completion_rate(total, completed),
        sessions_current_month=count_sessions_in_month(db, block_ids, now),
    )


# ---------------------------------------------------------------------------
# Recording
# ---------------------------------------------------------------------------


def start_session(db: Session, form: Form, params: dict | None = None) -> FormSession:
    session = FormSession(form_id=form.id, params=params or None)
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def get_session(db: Session, form: Form, token: str) -> FormSession:
    session = db.execute(
        select(FormSession).where(FormSession.form_id == form.id, FormSession.token == token)
    ).scalar_one_or_none()
    if session is None:
        raise SessionNotFound(token)
    return session


def record_response(
    db: Session,
    session: FormSession,
    block_uuid: str,
    value=None,
    interaction_uuid: str | None = None,
) -> FormSessionResponse:
    """Store a visitor's answer to one block of the session's form."""
    if session.is_completed:
        raise SessionAlreadyCompleted(session.token)

    block = db.execute(
        select(FormBlock).where(FormBlock.form_id == session.form_id, FormBlock.uuid == block_uuid)
    ).scalar_one_or_none()
    if block is None:
        raise BlockNotFound(block_uuid)

    interaction_id = None
    if interaction_uuid is not None:
        interaction = db.execute(
            select(FormBlockInteraction).where(
                FormBlockInteraction.form_block_id == block.id,
                FormBlockInteraction.uuid == interaction_uuid,
            )
        ).scalar_one_or_none()
        if interaction is None:
            raise BlockNotFound(interaction_uuid)
        interaction_id = interaction.id

    response = FormSessionResponse(
        form_session_id=session.id,
        form_block_id=block.id,
        form_block_interaction_id=interaction_id,
        value=value,
    )
    db.add(response)
    db.commit()
    db.refresh(response)
    return response


def complete_session(db: Session, session: FormSession) -> FormSession:
    if not session.is_completed:
        session.is_completed = True
        db.commit()
        db.refresh(session)
        logger.info("Form session %s completed (form %s)", session.token, session.form_id)
    return session
