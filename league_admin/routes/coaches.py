from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import field_validator
from sqlmodel import Session, select

from league_admin.database import get_session
from league_admin.models.coach import Coach
from league_admin.utils.api_models import ApiModel

router = APIRouter()


class CoachCreate(ApiModel):
    full_name: str
    email: str
    phone: Optional[str] = None

    @field_validator("full_name", "email")
    @classmethod
    def validate_required(cls, v):
        if not v or not v.strip():
            raise ValueError("fullName and email required")
        return v.strip()


class CoachResponse(ApiModel):
    id: int
    full_name: str
    email: str
    phone: Optional[str] = None
    created_at: datetime


@router.get("/coaches", response_model=List[CoachResponse])
def list_coaches(session: Session = Depends(get_session)):
    coaches = session.exec(select(Coach).order_by(Coach.full_name, Coach.id)).all()
    return [CoachResponse.model_validate(c) for c in coaches]


@router.post("/coaches", response_model=CoachResponse, status_code=201)
def create_coach(request: CoachCreate, session: Session = Depends(get_session)):
    """Add a coach, or update name/phone of the coach with the same email"""
    email = request.email.lower()
    coach = session.exec(select(Coach).where(Coach.email == email)).first()
    if coach:
        coach.full_name = request.full_name
        coach.phone = request.phone or None
    else:
        coach = Coach(full_name=request.full_name, email=email, phone=request.phone or None)

    session.add(coach)
    session.commit()
    session.refresh(coach)
    return CoachResponse.model_validate(coach)
