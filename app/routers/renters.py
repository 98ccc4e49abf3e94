# app/routers/renters.py
"""Read-only renter views for operators. Renters are only ever created by POST /submit."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.renter import RenterOut
from app.services import renter_service

router = APIRouter()


@router.get("/renters", response_model=list[RenterOut], summary="Latest registrations")
def list_renters(limit: int = 50, db: Session = Depends(get_db)):
    return renter_service.list_renters(db, limit)


@router.get("/renters/{renter_id}", response_model=RenterOut)
def get_renter(renter_id: int, db: Session = Depends(get_db)):
    return renter_service.get_renter(db, renter_id)
