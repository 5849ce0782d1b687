"""Public form API: storyboard, embed script and visitor sessions.

Only published, non-trashed forms are reachable here; anything else is a 404.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.form import Form
from app.models.form_session import FormSession
from app.schemas.forms import (
    PublicForm,
    ResponseSubmission,
    SessionOut,
    SessionResponseOut,
    SessionStart,
)
from app.services.assets import AssetStorage, get_asset_storage
from app.services.forms import (
    BlockNotFound,
    FormNotFound,
    SessionAlreadyCompleted,
    SessionNotFound,
    complete_session,
    get_published_form,
    get_session,
    record_response,
    start_session,
)
from app.services.forms.presentation import build_embed_script, build_public_form

router = APIRouter()


def _get_public_form_or_404(form_uuid: str, db: Session) -> Form:
    try:
        return get_published_form(db, form_uuid)
    except FormNotFound:
        raise HTTPException(status_code=404, detail="Form not found")


def _get_session_or_404(form: Form, token: str, db: Session) -> FormSession:
    try:
        return get_session(db, form, token)
    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")


@router.get("/{form_uuid}", response_model=PublicForm)
def get_public_form(
    form_uuid: str,
    db: Session = Depends(get_db),
    assets: AssetStorage = Depends(get_asset_storage),
):
    form = _get_public_form_or_404(form_uuid, db)
    return build_public_form(form, assets)


@router.get("/{form_uuid}/embed.js")
def get_embed_script(
    form_uuid: str,
    db: Session = Depends(get_db),
    assets: AssetStorage = Depends(get_asset_storage),
):
    form = _get_public_form_or_404(form_uuid, db)
    return Response(content=build_embed_script(form, assets), media_type="application/javascript")


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


@router.post("/{form_uuid}/sessions", response_model=SessionOut, status_code=201)
def start_form_session(
    form_uuid: str,
    payload: SessionStart | None = None,
    db: Session = Depends(get_db),
):
    form = _get_public_form_or_404(form_uuid, db)
    return start_session(db, form, payload.params if payload else None)


@router.post(
    "/{form_uuid}/sessions/{token}/responses",
    response_model=SessionResponseOut,
    status_code=201,
)
def submit_response(
    form_uuid: str,
    token: str,
    payload: ResponseSubmission,
    db: Session = Depends(get_db),
):
    form = _get_public_form_or_404(form_uuid, db)
    session = _get_session_or_404(form, token, db)

    try:
        return record_response(db, session, payload.block, payload.value, payload.interaction)
    except BlockNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except SessionAlreadyCompleted:
        raise HTTPException(status_code=409, detail="Session is already completed")


@router.post("/{form_uuid}/sessions/{token}/complete", response_model=SessionOut)
def complete_form_session(
    form_uuid: str,
    token: str,
    db: Session = Depends(get_db),
):
    form = _get_public_form_or_404(form_uuid, db)
    session = _get_session_or_404(form, token, db)
    return complete_session(db, session)
