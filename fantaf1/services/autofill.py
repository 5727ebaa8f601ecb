"""
Autorrelleno de predicciones.

Para cada usuario que jugó antes en la temporada pero no envió predicción
para este evento, copia su última predicción enviada. Los puntos quedan sin
calcular hasta que se puntúe el evento.
"""
import logging

from sqlalchemy.orm import Session

from fantaf1.core.errors import NotFoundError
from fantaf1.db.models.event import Event
from fantaf1.db.models.prediction import Prediction

logger = logging.getLogger(__name__)


def autofill_event(db: Session, event_id: int) -> list[int]:
    event = db.get(Event, event_id)
    if not event:
        raise NotFoundError(f"Evento {event_id} no encontrado")

    already = {
        user_id
        for (user_id,) in db.query(Prediction.user_id).filter(Prediction.event_id == event_id)
    }

    # Predicciones enviadas por el usuario (no copias) en eventos anteriores
    previous = (
        db.query(Prediction)
        .join(Event, Event.id == Prediction.event_id)
        .filter(
            Event.season_id == event.season_id,
            Event.date < event.date,
            Prediction.is_autofilled.is_(False),
        )
        .order_by(Prediction.user_id, Event.date.desc(), Prediction.updated_at.desc())
        .all()
    )

    latest = {}
    for prediction in previous:
        latest.setdefault(prediction.user_id, prediction)

    filled = []
    try:
        for user_id, source in latest.items():
            if user_id in already:
                continue
            db.add(Prediction(
                user_id=user_id,
                event_id=event_id,
                first_place_id=source.first_place_id,
                second_place_id=source.second_place_id,
                third_place_id=source.third_place_id,
                rankings=list(source.rankings) if source.rankings else None,
                points=None,
                is_autofilled=True,
            ))
            filled.append(user_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Autorrelleno evento {event.name}: {len(filled)} predicciones copiadas")
    return filled
