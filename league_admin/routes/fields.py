from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import field_validator
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from league_admin.database import get_session
from league_admin.models.field import PlayingField
from league_admin.models.match import Match
from league_admin.models.tournament import Tournament
from league_admin.utils.api_models import ApiModel

router = APIRouter()


class FieldCreate(ApiModel):
    name: str
    location: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Field name is required")
        return v.strip()


class FieldResponse(ApiModel):
    id: int
    tournament_id: int
    name: str
    location: Optional[str] = None


@router.get("/tournaments/{tournament_id}/fields", response_model=List[FieldResponse])
def list_fields(tournament_id: int, session: Session = Depends(get_session)):
    if not session.get(Tournament, tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")
    fields = session.exec(
        select(PlayingField).where(PlayingField.tournament_id == tournament_id).order_by(PlayingField.name)
    ).all()
    return [FieldResponse.model_validate(f) for f in fields]


@router.post("/tournaments/{tournament_id}/fields", response_model=FieldResponse, status_code=201)
def create_field(tournament_id: int, request: FieldCreate, session: Session = Depends(get_session)):
    if not session.get(Tournament, tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")

    field = PlayingField(tournament_id=tournament_id, name=request.name, location=request.location)
    try:
        session.add(field)
        session.commit()
        session.refresh(field)
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail=f"Field '{request.name}' already exists for this tournament")
    return FieldResponse.model_validate(field)


@router.delete("/fields/{field_id}", status_code=204)
def delete_field(field_id: int, session: Session = Depends(get_session)):
    """Delete a field; refused while any match is placed on it"""
    field = session.get(PlayingField, field_id)
    if not field:
        raise HTTPException(status_code=404, detail="Field not found")

    in_use = session.exec(select(Match).where(Match.field_id == field_id)).first()
    if in_use:
        raise HTTPException(status_code=409, detail="Field has scheduled matches")

    session.delete(field)
    session.commit()
    return Response(status_code=204)
