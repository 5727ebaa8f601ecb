from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session
from fantaf1.db.session import get_db
from fantaf1.db.models.season import Season
from fantaf1.db.models.event import Event
from fantaf1.db.models.driver import Driver
from fantaf1.schemas.season import (
    SeasonCreate,
    SeasonUpdate,
    SeasonOut,
    EventCreate,
    EventOut,
    DriverCreate,
    DriverOut,
)
from fantaf1.core.deps import require_admin
from fantaf1.core.errors import NotFoundError
from fantaf1.services.autofill import autofill_event
from fantaf1.services.scoring import EventStatus

router = APIRouter(prefix="/admin", tags=["Admin"])


# -----------------------
# Temporadas
# -----------------------
@router.post("/seasons", response_model=SeasonOut)
def create_season(
    season_in: SeasonCreate,
    db: Session = Depends(get_db),
    current_user = Depends(require_admin),
):
    # Solo una temporada activa a la vez
    if season_in.is_active:
        db.query(Season).update({Season.is_active: False})

    season = Season(
        year=season_in.year,
        name=season_in.name,
        is_active=season_in.is_active,
        scoring_type=season_in.scoring_type.value,
    )
    db.add(season)
    db.commit()
    db.refresh(season)
    return season

@router.patch("/seasons/{season_id}", response_model=SeasonOut)
def update_season(
    season_id: int,
    season_in: SeasonUpdate,
    db: Session = Depends(get_db),
    current_user = Depends(require_admin),
):
    season = db.get(Season, season_id)
    if not season:
        raise HTTPException(status_code=404, detail="Temporada no encontrada")

    if season_in.scoring_type is not None and season_in.scoring_type.value != season.scoring_type:
        scored = (
            db.query(Event)
            .filter(Event.season_id == season_id, Event.status == EventStatus.COMPLETED.value)
            .count()
        )
        if scored:
            raise HTTPException(
                status_code=409,
                detail="No se puede cambiar el modo de puntuación con eventos ya puntuados",
            )
        season.scoring_type = season_in.scoring_type.value

    if season_in.name is not None:
        season.name = season_in.name

    if season_in.is_active is not None:
        if season_in.is_active:
            db.query(Season).filter(Season.id != season_id).update({Season.is_active: False})
        season.is_active = season_in.is_active

    db.commit()
    db.refresh(season)
    return season


# -----------------------
# Eventos
# -----------------------
@router.post("/events", response_model=EventOut)
def create_event(
    event_in: EventCreate,
    db: Session = Depends(get_db),
    current_user = Depends(require_admin),
):
    if not db.get(Season, event_in.season_id):
        raise HTTPException(status_code=404, detail="Temporada no encontrada")

    if event_in.closing_date > event_in.date:
        raise HTTPException(status_code=422, detail="El cierre debe ser antes del evento")

    event = Event(
        season_id=event_in.season_id,
        name=event_in.name,
        type=event_in.type.value,
        date=event_in.date,
        closing_date=event_in.closing_date,
        status=EventStatus.UPCOMING.value,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event

@router.post("/events/{event_id}/autofill")
def autofill_predictions(
    event_id: int,
    db: Session = Depends(get_db),
    current_user = Depends(require_admin),
):
    try:
        filled = autofill_event(db, event_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Evento no encontrado")

    return {"message": "Predicciones copiadas", "user_ids": filled}


# -----------------------
# Pilotos
# -----------------------
@router.post("/drivers", response_model=DriverOut)
def create_driver(
    driver_in: DriverCreate,
    db: Session = Depends(get_db),
    current_user = Depends(require_admin),
):
    code = driver_in.code.upper()
    if db.query(Driver).filter(Driver.code == code).first():
        raise HTTPException(status_code=400, detail="Ya existe un piloto con ese código")

    driver = Driver(
        code=code,
        name=driver_in.name,
        team=driver_in.team,
        number=driver_in.number,
    )
    db.add(driver)
    db.commit()
    db.refresh(driver)
    return driver
