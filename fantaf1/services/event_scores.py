"""
Puntuación de eventos contra la base de datos.

Carga el evento y sus predicciones, delega el cálculo en
fantaf1.services.scoring y guarda todos los puntos en una sola transacción.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from fantaf1.core.config import settings
from fantaf1.core.errors import IncompleteResultsError, NotFoundError
from fantaf1.db.models.event import Event
from fantaf1.db.models.prediction import Prediction
from fantaf1.db.models.season import Season
from fantaf1.services.scoring import (
    EventStatus,
    FullGridPrediction,
    FullGridResult,
    LegacyTop3Prediction,
    LegacyTop3Result,
    ScoringConfig,
    ScoringMode,
    ScoreSummary,
    calculate_event_leaderboard,
    calculate_leaderboard,
    calculate_score,
    summarize_scores,
    validate_event_results,
)

logger = logging.getLogger(__name__)


def get_scoring_config() -> ScoringConfig:
    return ScoringConfig.from_settings(settings)


def result_from_event(event: Event, scoring_mode):
    """
    Elige la variante de resultado según el modo.
    LEGACY_TOP3 usa el podio si hay alguno; si no, el orden completo.
    FULL_GRID_DIFF usa el orden completo si existe; si no, el podio.
    """
    mode = ScoringMode.parse(scoring_mode)
    podium = LegacyTop3Result(event.first_place_id, event.second_place_id, event.third_place_id)
    has_podium = any(slot is not None for slot in podium.slots)

    if mode is ScoringMode.LEGACY_TOP3:
        if has_podium or not event.results:
            return podium
        return FullGridResult(event.results)

    if event.results:
        return FullGridResult(event.results)
    return podium


def prediction_from_row(prediction: Prediction, scoring_mode):
    mode = ScoringMode.parse(scoring_mode)
    podium = LegacyTop3Prediction(
        prediction.first_place_id,
        prediction.second_place_id,
        prediction.third_place_id,
    )
    has_podium = any(slot is not None for slot in podium.slots)

    if mode is ScoringMode.LEGACY_TOP3:
        if has_podium or not prediction.rankings:
            return podium
        return FullGridPrediction(prediction.rankings)

    if prediction.rankings:
        return FullGridPrediction(prediction.rankings)
    return podium


def _is_empty(prediction: Prediction) -> bool:
    return not prediction.rankings and all(
        slot is None
        for slot in (prediction.first_place_id, prediction.second_place_id, prediction.third_place_id)
    )


def score_event(db: Session, event_id: int, config: Optional[ScoringConfig] = None) -> ScoreSummary:
    """
    Calcula y guarda los puntos de todas las predicciones de un evento.

    Todo o nada: si algo falla no queda ninguna predicción puntuada a medias.
    Volver a llamarlo (resultados corregidos) sobrescribe los puntos.
    """
    event = (
        db.query(Event)
        .options(joinedload(Event.season), joinedload(Event.predictions))
        .filter(Event.id == event_id)
        .first()
    )
    if not event:
        raise NotFoundError(f"Evento {event_id} no encontrado")

    mode = ScoringMode.parse(event.season.scoring_type)
    result = result_from_event(event, mode)

    if not validate_event_results(result, mode):
        raise IncompleteResultsError(event_id, mode.value)

    config = config or get_scoring_config()

    # 1. Calcular todo antes de escribir nada
    updates = []
    for prediction in event.predictions:
        if _is_empty(prediction):
            logger.warning(f"Predicción {prediction.id} vacía, se deja sin puntuar")
            updates.append((prediction, None))
            continue
        points = calculate_score(
            prediction_from_row(prediction, mode),
            result,
            event.type,
            mode,
            config,
        )
        updates.append((prediction, points))

    # 2. Guardar en una sola transacción
    try:
        for prediction, points in updates:
            prediction.points = points
        event.status = EventStatus.COMPLETED.value
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"Error guardando puntos del evento {event_id}")
        raise

    summary = summarize_scores([points for _, points in updates if points is not None])
    logger.info(
        f"Puntos calculados para {summary.count} predicciones del evento "
        f"{event.name} ({mode.value})"
    )
    return summary


def season_leaderboard(db: Session, season_id: int):
    season = db.get(Season, season_id)
    if not season:
        raise NotFoundError(f"Temporada {season_id} no encontrada")

    # Orden por user_id: es el desempate estable de la clasificación
    predictions = (
        db.query(Prediction)
        .join(Event, Event.id == Prediction.event_id)
        .filter(Event.season_id == season_id)
        .filter(Prediction.points.is_not(None))
        .order_by(Prediction.user_id, Event.date)
        .all()
    )
    return season, calculate_leaderboard(predictions, season.scoring_type)


def event_leaderboard(db: Session, event_id: int, config: Optional[ScoringConfig] = None):
    event = (
        db.query(Event)
        .options(joinedload(Event.season))
        .filter(Event.id == event_id)
        .first()
    )
    if not event:
        raise NotFoundError(f"Evento {event_id} no encontrado")

    predictions = (
        db.query(Prediction)
        .filter(Prediction.event_id == event_id)
        .order_by(Prediction.user_id)
        .all()
    )
    entries = [(p.user_id, p.points) for p in predictions]
    rows = calculate_event_leaderboard(entries, event.season.scoring_type, config or get_scoring_config())
    return event, rows
