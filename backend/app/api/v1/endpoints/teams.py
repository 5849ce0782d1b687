from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.database import get_db
from app.models.team import Team
from app.models.user import User
from app.schemas.teams import TeamCreate, TeamResponse

router = APIRouter()


@router.post("/", response_model=TeamResponse, status_code=201)
def create_team(
    payload: TeamCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    team = Team(name=payload.name, owner_id=current_user.id)
    db.add(team)
    db.commit()
    db.refresh(team)
    return team


@router.get("/", response_model=list[TeamResponse])
def list_teams(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return (
        db.execute(select(Team).where(Team.owner_id == current_user.id).order_by(Team.created_at.asc()))
        .scalars()
        .all()
    )
