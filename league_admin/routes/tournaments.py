from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import field_validator, model_validator
from sqlmodel import Session, select

from league_admin.database import get_session
from league_admin.models.tournament import TOURNAMENT_STATUSES, Tournament
from league_admin.utils.api_models import ApiModel

router = APIRouter()


class TournamentCreate(ApiModel):
    name: str
    start_date: date
    end_date: date
    rules: Optional[str] = None
    venue: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Tournament name is required")
        return v.strip()

    @model_validator(mode="after")
    def validate_date_range(self):
        if self.end_date < self.start_date:
            raise ValueError("End date must be after start date")
        return self


class TournamentUpdate(ApiModel):
    name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    rules: Optional[str] = None
    venue: Optional[str] = None
    status: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v is not None and v not in TOURNAMENT_STATUSES:
            raise ValueError(f"status must be one of {TOURNAMENT_STATUSES}")
        return v

    @model_validator(mode="after")
    def validate_date_range(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date must be after start date")
        return self


class TournamentResponse(ApiModel):
    id: int
    name: str
    start_date: date
    end_date: date
    rules: Optional[str] = None
    venue: Optional[str] = None
    status: str
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


@router.get("/tournaments", response_model=List[TournamentResponse])
def list_tournaments(session: Session = Depends(get_session)):
    """List all tournaments, newest start date first"""
    tournaments = session.exec(select(Tournament).order_by(Tournament.start_date.desc(), Tournament.id)).all()
    return [TournamentResponse.model_validate(t) for t in tournaments]


@router.post("/tournaments", response_model=TournamentResponse, status_code=201)
def create_tournament(tournament_data: TournamentCreate, session: Session = Depends(get_session)):
    tournament = Tournament(**tournament_data.model_dump())
    session.add(tournament)
    session.commit()
    session.refresh(tournament)
    return TournamentResponse.model_validate(tournament)


@router.get("/tournaments/{tournament_id}", response_model=TournamentResponse)
def get_tournament(tournament_id: int, session: Session = Depends(get_session)):
    """Get a tournament by ID"""
    tournament = session.get(Tournament, tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return TournamentResponse.model_validate(tournament)


@router.put("/tournaments/{tournament_id}", response_model=TournamentResponse)
def update_tournament(tournament_id: int, tournament_data: TournamentUpdate, session: Session = Depends(get_session)):
    tournament = session.get(Tournament, tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")

    update_data = tournament_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(tournament, field, value)

    # The merged range must still be valid when only one end was sent
    if tournament.end_date < tournament.start_date:
        raise HTTPException(status_code=400, detail="End date must be after start date")

    tournament.updated_at = datetime.utcnow()
    session.add(tournament)
    session.commit()
    session.refresh(tournament)
    return TournamentResponse.model_validate(tournament)


@router.delete("/tournaments/{tournament_id}", status_code=204)
def delete_tournament(tournament_id: int, session: Session = Depends(get_session)):
    tournament = session.get(Tournament, tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")
    if tournament.matches or tournament.teams or tournament.fields:
        raise HTTPException(
            status_code=409, detail="Tournament still has fields, teams or matches; remove them first"
        )

    session.delete(tournament)
    session.commit()
    return Response(status_code=204)
