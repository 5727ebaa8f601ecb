from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from fantaf1.db.session import get_db
from fantaf1.db.models.event import Event
from fantaf1.db.models.driver import Driver
from fantaf1.schemas.season import EventOut, DriverOut

router = APIRouter(tags=["Events"])

@router.get("/events/season/{season_id}", response_model=list[EventOut])
def list_events(season_id: int, db: Session = Depends(get_db)):
    return (
        db.query(Event)
        .filter(Event.season_id == season_id)
        .order_by(Event.date)
        .all()
    )

@router.get("/drivers", response_model=list[DriverOut])
def list_drivers(db: Session = Depends(get_db)):
    return (
        db.query(Driver)
        .filter(Driver.active.is_(True))
        .order_by(Driver.number, Driver.code)
        .all()
    )
