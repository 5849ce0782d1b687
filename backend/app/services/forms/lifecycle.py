"""Form lifecycle: creation, publication, trash, duplication and block edits."""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import Select, or_, select
from sqlalchemy.orm import Session

from app.models.form import Form
from app.models.form_block import FormBlock
from app.models.form_block_interaction import FormBlockInteraction
from app.models.user import User
from app.services.forms.exceptions import BlockNotFound, FormNotFound
from app.services.forms.templates import apply_form_template, export_form_template
from app.services.public_ids import encode_public_id

logger = logging.getLogger(__name__)

PUBLICATION_FILTERS = ("published", "unpublished", "trashed")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ---------------------------------------------------------------------------
# Derived state
# ---------------------------------------------------------------------------


def is_published(form: Form, now: datetime | None = None) -> bool:
    if form.published_at is None:
        return False
    return _as_utc(form.published_at) <= _as_utc(now or _utcnow())


def is_trashed(form: Form, now: datetime | None = None) -> bool:
    if form.deleted_at is None:
        return False
    return _as_utc(form.deleted_at) <= _as_utc(now or _utcnow())


def is_owner(form: Form, user: User | None) -> bool:
    return user is not None and user.id == form.user_id


def apply_publication_filter(query: Select, filter_: str | None, now: datetime | None = None) -> Select:
    """Narrow a ``select(Form)`` by publication state.

    Soft-deleted forms only show up under ``trashed``. Unknown filter values
    are not an error: they leave the query unfiltered.
    """
    now = now or _utcnow()

    if filter_ == "trashed":
        return query.where(Form.deleted_at.is_not(None))

    query = query.where(Form.deleted_at.is_(None))
    if filter_ == "published":
        return query.where(Form.published_at.is_not(None), Form.published_at <= now)
    if filter_ == "unpublished":
        return query.where(or_(Form.published_at.is_(None), Form.published_at > now))
    return query


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def get_form_by_public_id(db: Session, public_id: str, *, with_trashed: bool = False) -> Form:
    query = select(Form).where(Form.uuid == public_id)
    if not with_trashed:
        query = query.where(Form.deleted_at.is_(None))
    form = db.execute(query).scalar_one_or_none()
    if form is None:
        raise FormNotFound(public_id)
    return form


def get_published_form(db: Session, public_id: str) -> Form:
    form = get_form_by_public_id(db, public_id)
    if not is_published(form):
        raise FormNotFound(public_id)
    return form


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


def _insert_form(db: Session, *, name: str, user_id: uuid.UUID, team_id: uuid.UUID | None, **config) -> Form:
    # Inserted with a random token first; the public id needs the sequential key.
    form = Form(name=name, user_id=user_id, team_id=team_id, **config)
    db.add(form)
    db.flush()
    form.uuid = encode_public_id(form.id)
    db.flush()
    return form


def create_form(
    db: Session,
    user: User,
    name: str,
    team_id: uuid.UUID | None = None,
    **config,
) -> Form:
    form = _insert_form(db, name=name, user_id=user.id, team_id=team_id, **config)
    db.commit()
    db.refresh(form)
    logger.info("Created form %s (%s) for user %s", form.uuid, form.name, user.id)
    return form


def update_form_config(db: Session, form: Form, data: dict) -> Form:
    for field, value in data.items():
        setattr(form, field, value)
    db.commit()
    db.refresh(form)
    return form


def publish_form(db: Session, form: Form, at: datetime | None = None) -> Form:
    form.published_at = _as_utc(at).astimezone(timezone.utc) if at else _utcnow()
    db.commit()
    db.refresh(form)
    logger.info("Published form %s at %s", form.uuid, form.published_at)
    return form


def unpublish_form(db: Session, form: Form) -> Form:
    form.published_at = None
    db.commit()
    db.refresh(form)
    logger.info("Unpublished form %s", form.uuid)
    return form


def soft_delete_form(db: Session, form: Form) -> Form:
    form.deleted_at = _utcnow()
    db.commit()
    db.refresh(form)
    logger.info("Moved form %s to trash", form.uuid)
    return form


def restore_form(db: Session, form: Form) -> Form:
    form.deleted_at = None
    db.commit()
    db.refresh(form)
    logger.info("Restored form %s from trash", form.uuid)
    return form


def duplicate_form(db: Session, source: Form, new_name: str) -> Form:
    """Create an independent copy of ``source`` named ``new_name``.

    Only owner and team are taken from the source directly; configuration and
    blocks travel through the template export/import. The copy is committed
    as one unit: if any step fails nothing is persisted.
    """
    try:
        duplicate = _insert_form(db, name=new_name, user_id=source.user_id, team_id=source.team_id)
        apply_form_template(db, duplicate, export_form_template(source))
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Duplicating form %s failed", source.uuid)
        raise

    db.refresh(duplicate)
    logger.info("Duplicated form %s into %s (%s)", source.uuid, duplicate.uuid, new_name)
    return duplicate


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------


def get_block(db: Session, form: Form, block_uuid: str) -> FormBlock:
    block = db.execute(
        select(FormBlock).where(FormBlock.form_id == form.id, FormBlock.uuid == block_uuid)
    ).scalar_one_or_none()
    if block is None:
        raise BlockNotFound(block_uuid)
    return block


def _build_interactions(interactions: list[dict]) -> list[FormBlockInteraction]:
    return [FormBlockInteraction(**data) for data in interactions]


def create_block(db: Session, form: Form, data: dict) -> FormBlock:
    data = dict(data)
    interactions = data.pop("interactions", None) or []
    if data.get("sequence") is None:
        data["sequence"] = max((b.sequence for b in form.blocks), default=-1) + 1

    block = FormBlock(form_id=form.id, **data)
    block.interactions = _build_interactions(interactions)
    db.add(block)
    db.commit()
    db.refresh(block)
    return block


def update_block(db: Session, block: FormBlock, data: dict) -> FormBlock:
    data = dict(data)
    if "interactions" in data:
        interactions = data.pop("interactions") or []
        block.interactions = _build_interactions(interactions)
    for field, value in data.items():
        setattr(block, field, value)
    db.commit()
    db.refresh(block)
    return block


def delete_block(db: Session, block: FormBlock) -> None:
    db.delete(block)
    db.commit()
