from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session, joinedload
from fantaf1.db.session import get_db
from fantaf1.db.models.event import Event
from fantaf1.db.models.prediction import Prediction
from fantaf1.schemas.prediction import PredictionCreate, PredictionOut
from fantaf1.core.deps import get_current_user
from fantaf1.services.f1_sync import unknown_driver_ids
from fantaf1.services.scoring import (
    FullGridPrediction,
    LegacyTop3Prediction,
    ScoringMode,
    can_make_prediction,
    validate_prediction,
)

router = APIRouter(prefix="/predictions", tags=["Predictions"])

@router.post("/{event_id}", response_model=PredictionOut)
def upsert_prediction(
    event_id: int,
    payload: PredictionCreate,
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    event = (
        db.query(Event)
        .options(joinedload(Event.season))
        .filter(Event.id == event_id)
        .first()
    )
    if not event:
        raise HTTPException(status_code=404, detail="Evento no encontrado")

    if not can_make_prediction(event.status, event.closing_date):
        raise HTTPException(status_code=400, detail="Predicción bloqueada")

    mode = ScoringMode.parse(event.season.scoring_type)

    # Qué tiene que mandar el usuario depende del modo de la temporada
    if mode is ScoringMode.FULL_GRID_DIFF:
        candidate = FullGridPrediction(payload.rankings or [])
    else:
        candidate = LegacyTop3Prediction(
            payload.first_place_id,
            payload.second_place_id,
            payload.third_place_id,
        )

    if not validate_prediction(candidate):
        raise HTTPException(status_code=422, detail="Predicción no válida: pilotos repetidos o incompletos")

    picked = list(candidate.order) if mode is ScoringMode.FULL_GRID_DIFF else [candidate.first, candidate.second, candidate.third]
    unknown = unknown_driver_ids(db, picked)
    if unknown:
        raise HTTPException(status_code=422, detail=f"Pilotos desconocidos o inactivos: {unknown}")

    prediction = (
        db.query(Prediction)
        .filter(
            Prediction.user_id == current_user.id,
            Prediction.event_id == event_id
        )
        .first()
    )

    if not prediction:
        prediction = Prediction(user_id=current_user.id, event_id=event_id)
        db.add(prediction)

    if mode is ScoringMode.FULL_GRID_DIFF:
        prediction.rankings = list(candidate.order)
        # Podio derivado para las vistas antiguas
        podium = list(candidate.order[:3]) + [None] * (3 - min(len(candidate.order), 3))
        prediction.first_place_id, prediction.second_place_id, prediction.third_place_id = podium
    else:
        prediction.first_place_id = candidate.first
        prediction.second_place_id = candidate.second
        prediction.third_place_id = candidate.third
        prediction.rankings = None

    prediction.is_autofilled = False
    db.commit()
    db.refresh(prediction)

    return prediction

@router.get("/{event_id}/me", response_model=PredictionOut | None)
def get_my_prediction(
    event_id: int,
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    return (
        db.query(Prediction)
        .filter(
            Prediction.user_id == current_user.id,
            Prediction.event_id == event_id
        )
        .first()
    )
