from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session, joinedload
from fantaf1.db.session import get_db
from fantaf1.db.models.event import Event
from fantaf1.schemas.season import EventOut
from fantaf1.schemas.prediction import ResultsUpdate, FetchedResults, ApplyFetchedResults
from fantaf1.core.deps import require_admin
from fantaf1.core.errors import InvalidResultsError, ResultsFeedError
from fantaf1.services.scoring import EventStatus
from fantaf1.services import f1_sync

router = APIRouter(prefix="/results", tags=["Race Results"])


def _get_event(db: Session, event_id: int) -> Event:
    event = (
        db.query(Event)
        .options(joinedload(Event.season))
        .filter(Event.id == event_id)
        .first()
    )
    if not event:
        raise HTTPException(status_code=404, detail="Evento no encontrado")
    return event


@router.put("/{event_id}", response_model=EventOut)
def update_results(
    event_id: int,
    payload: ResultsUpdate,
    db: Session = Depends(get_db),
    current_user = Depends(require_admin),
):
    event = _get_event(db, event_id)

    # Con orden completo el podio sale de ahí
    if payload.results:
        try:
            return f1_sync.apply_results(db, event, payload.results)
        except InvalidResultsError as e:
            raise HTTPException(status_code=422, detail=str(e))

    podium = [payload.first_place_id, payload.second_place_id, payload.third_place_id]
    set_slots = [d for d in podium if d is not None]
    if not set_slots:
        raise HTTPException(status_code=422, detail="Sin resultados")
    if len(set(set_slots)) != len(set_slots):
        raise HTTPException(status_code=422, detail="Piloto repetido en el podio")
    unknown = f1_sync.unknown_driver_ids(db, set_slots)
    if unknown:
        raise HTTPException(status_code=422, detail=f"Pilotos desconocidos o inactivos: {unknown}")

    event.first_place_id, event.second_place_id, event.third_place_id = podium
    # El orden anterior ya no cuadra con el podio corregido
    event.results = None
    if event.status == EventStatus.UPCOMING.value:
        event.status = EventStatus.CLOSED.value

    db.commit()
    db.refresh(event)
    return event


@router.get("/{event_id}", response_model=EventOut)
def get_results(event_id: int, db: Session = Depends(get_db)):
    return _get_event(db, event_id)


@router.post("/{event_id}/fetch", response_model=FetchedResults)
def preview_fetched_results(
    event_id: int,
    db: Session = Depends(get_db),
    current_user = Depends(require_admin),
):
    """Descarga el orden de llegada de FastF1. Solo vista previa: no guarda nada."""
    event = _get_event(db, event_id)

    try:
        codes = f1_sync.fetch_event_order(event.season.year, event.name, event.type)
    except ResultsFeedError as e:
        raise HTTPException(status_code=502, detail=f"Error obteniendo resultados: {e}")

    driver_ids, unknown = f1_sync.map_codes_to_drivers(db, codes)
    return FetchedResults(codes=codes, driver_ids=driver_ids, unknown_codes=unknown)


@router.put("/{event_id}/fetch", response_model=EventOut)
def apply_fetched_results(
    event_id: int,
    payload: ApplyFetchedResults,
    db: Session = Depends(get_db),
    current_user = Depends(require_admin),
):
    event = _get_event(db, event_id)
    try:
        return f1_sync.apply_results(db, event, payload.driver_ids)
    except InvalidResultsError as e:
        raise HTTPException(status_code=422, detail=str(e))
