"""Form API: owner CRUD, publication, trash, duplication, templates, blocks and metrics."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.database import get_db
from app.models.form import Form
from app.models.team import Team
from app.models.user import User
from app.schemas.forms import (
    BlockCreate,
    BlockOut,
    BlockUpdate,
    FormCreate,
    FormDetailOut,
    FormDuplicateRequest,
    FormListResponse,
    FormMetrics,
    FormOut,
    FormTemplate,
    FormUpdate,
    PublicStoryboard,
)
from app.services.assets import AssetStorage, get_asset_storage
from app.services.forms import (
    BlockNotFound,
    FormNotFound,
    InvalidTemplate,
    apply_form_template,
    apply_publication_filter,
    create_block,
    create_form,
    delete_block,
    duplicate_form,
    export_form_template,
    get_block,
    get_form_by_public_id,
    get_form_metrics,
    is_owner,
    is_trashed,
    publish_form,
    restore_form,
    soft_delete_form,
    unpublish_form,
    update_block,
    update_form_config,
)
from app.services.forms.presentation import build_form_detail, build_form_out, build_public_storyboard

router = APIRouter()

_NON_NULL_BLOCK_FIELDS = ("type", "sequence", "is_required", "is_disabled")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_owned_form_or_404(
    form_uuid: str,
    user: User,
    db: Session,
    *,
    with_trashed: bool = False,
) -> Form:
    try:
        form = get_form_by_public_id(db, form_uuid, with_trashed=with_trashed)
    except FormNotFound:
        raise HTTPException(status_code=404, detail="Form not found")
    if not is_owner(form, user):
        raise HTTPException(status_code=403, detail="Not the owner of this form")
    return form


def _get_block_or_404(form: Form, block_uuid: str, db: Session):
    try:
        return get_block(db, form, block_uuid)
    except BlockNotFound:
        raise HTTPException(status_code=404, detail="Block not found")


def _check_team(team_id: uuid.UUID | None, user: User, db: Session) -> None:
    if team_id is None:
        return
    team = db.get(Team, team_id)
    if team is None or team.owner_id != user.id:
        raise HTTPException(status_code=404, detail="Team not found")


# ---------------------------------------------------------------------------
# Form CRUD
# ---------------------------------------------------------------------------


@router.post("/", response_model=FormOut, status_code=201)
def create_form_endpoint(
    payload: FormCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    assets: AssetStorage = Depends(get_asset_storage),
):
    _check_team(payload.team_id, current_user, db)
    config = payload.model_dump(exclude_unset=True, exclude={"name", "team_id"})
    form = create_form(db, current_user, payload.name, team_id=payload.team_id, **config)
    return build_form_out(form, assets)


@router.get("/", response_model=FormListResponse)
def list_forms(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    filter: str | None = Query(None, description="published | unpublished | trashed"),
    team_id: uuid.UUID | None = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    assets: AssetStorage = Depends(get_asset_storage),
):
    query = apply_publication_filter(select(Form).where(Form.user_id == current_user.id), filter)
    if team_id is not None:
        query = query.where(Form.team_id == team_id)

    total = db.execute(select(func.count()).select_from(query.subquery())).scalar_one()
    offset = (page - 1) * page_size
    forms = (
        db.execute(query.order_by(Form.created_at.desc(), Form.id.desc()).offset(offset).limit(page_size))
        .scalars()
        .all()
    )

    return FormListResponse(
        items=[build_form_out(form, assets) for form in forms],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{form_uuid}", response_model=FormDetailOut)
def get_form(
    form_uuid: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    assets: AssetStorage = Depends(get_asset_storage),
):
    form = _get_owned_form_or_404(form_uuid, current_user, db, with_trashed=True)
    return build_form_detail(form, assets, get_form_metrics(db, form))


@router.put("/{form_uuid}", response_model=FormOut)
def update_form(
    form_uuid: str,
    payload: FormUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    assets: AssetStorage = Depends(get_asset_storage),
):
    form = _get_owned_form_or_404(form_uuid, current_user, db)

    update_data = payload.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=422, detail="No fields to update")
    if update_data.get("name", "") is None:
        raise HTTPException(status_code=422, detail="Form name cannot be empty")

    return build_form_out(update_form_config(db, form, update_data), assets)


@router.delete("/{form_uuid}", status_code=204)
def delete_form(
    form_uuid: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    form = _get_owned_form_or_404(form_uuid, current_user, db)
    soft_delete_form(db, form)


@router.post("/{form_uuid}/restore", response_model=FormOut)
def restore_form_endpoint(
    form_uuid: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    assets: AssetStorage = Depends(get_asset_storage),
):
    form = _get_owned_form_or_404(form_uuid, current_user, db, with_trashed=True)
    if not is_trashed(form):
        raise HTTPException(status_code=409, detail="Form is not in the trash")
    return build_form_out(restore_form(db, form), assets)


# ---------------------------------------------------------------------------
# Publication
# ---------------------------------------------------------------------------


@router.post("/{form_uuid}/publish", response_model=FormOut)
def publish_form_endpoint(
    form_uuid: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    assets: AssetStorage = Depends(get_asset_storage),
):
    form = _get_owned_form_or_404(form_uuid, current_user, db)
    return build_form_out(publish_form(db, form), assets)


@router.post("/{form_uuid}/unpublish", response_model=FormOut)
def unpublish_form_endpoint(
    form_uuid: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    assets: AssetStorage = Depends(get_asset_storage),
):
    form = _get_owned_form_or_404(form_uuid, current_user, db)
    return build_form_out(unpublish_form(db, form), assets)


# ---------------------------------------------------------------------------
# Duplication and templates
# ---------------------------------------------------------------------------


@router.post("/{form_uuid}/duplicate", response_model=FormOut, status_code=201)
def duplicate_form_endpoint(
    form_uuid: str,
    payload: FormDuplicateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    assets: AssetStorage = Depends(get_asset_storage),
):
    form = _get_owned_form_or_404(form_uuid, current_user, db)
    return build_form_out(duplicate_form(db, form, payload.name), assets)


@router.get("/{form_uuid}/template", response_model=FormTemplate)
def export_template(
    form_uuid: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    form = _get_owned_form_or_404(form_uuid, current_user, db)
    return export_form_template(form)


@router.post("/{form_uuid}/template", response_model=FormOut)
def apply_template(
    form_uuid: str,
    payload: FormTemplate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    assets: AssetStorage = Depends(get_asset_storage),
):
    form = _get_owned_form_or_404(form_uuid, current_user, db)
    try:
        apply_form_template(db, form, payload)
    except InvalidTemplate as exc:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(exc))
    db.commit()
    db.refresh(form)
    return build_form_out(form, assets)


# ---------------------------------------------------------------------------
# Metrics and preview
# ---------------------------------------------------------------------------


@router.get("/{form_uuid}/metrics", response_model=FormMetrics)
def form_metrics(
    form_uuid: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    form = _get_owned_form_or_404(form_uuid, current_user, db, with_trashed=True)
    return get_form_metrics(db, form)


@router.get("/{form_uuid}/storyboard", response_model=PublicStoryboard)
def preview_storyboard(
    form_uuid: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The storyboard a visitor would see, available before publishing."""
    form = _get_owned_form_or_404(form_uuid, current_user, db)
    return build_public_storyboard(form)


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------


@router.get("/{form_uuid}/blocks", response_model=list[BlockOut])
def list_blocks(
    form_uuid: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    form = _get_owned_form_or_404(form_uuid, current_user, db)
    return form.blocks


@router.post("/{form_uuid}/blocks", response_model=BlockOut, status_code=201)
def create_block_endpoint(
    form_uuid: str,
    payload: BlockCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    form = _get_owned_form_or_404(form_uuid, current_user, db)
    return create_block(db, form, payload.model_dump())


@router.put("/{form_uuid}/blocks/{block_uuid}", response_model=BlockOut)
def update_block_endpoint(
    form_uuid: str,
    block_uuid: str,
    payload: BlockUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    form = _get_owned_form_or_404(form_uuid, current_user, db)
    block = _get_block_or_404(form, block_uuid, db)

    update_data = payload.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=422, detail="No fields to update")
    null_fields = sorted(f for f in _NON_NULL_BLOCK_FIELDS if f in update_data and update_data[f] is None)
    if null_fields:
        raise HTTPException(status_code=422, detail=f"Fields cannot be null: {', '.join(null_fields)}")

    return update_block(db, block, update_data)


@router.delete("/{form_uuid}/blocks/{block_uuid}", status_code=204)
def delete_block_endpoint(
    form_uuid: str,
    block_uuid: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    form = _get_owned_form_or_404(form_uuid, current_user, db)
    delete_block(db, _get_block_or_404(form, block_uuid, db))
