import logging
from dataclasses import asdict
from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session
from fantaf1.db.session import get_db
from fantaf1.schemas.leaderboard import ScoreSummaryOut
from fantaf1.core.deps import require_admin
from fantaf1.core.errors import IncompleteResultsError, NotFoundError, UnknownScoringModeError
from fantaf1.services.event_scores import score_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scoring", tags=["Scoring"])

@router.post("/events/{event_id}", response_model=ScoreSummaryOut)
def calculate_event_scores(
    event_id: int,
    db: Session = Depends(get_db),
    current_user = Depends(require_admin),
):
    try:
        summary = score_event(db, event_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Evento no encontrado")
    except IncompleteResultsError:
        raise HTTPException(status_code=400, detail="Resultados del evento incompletos")
    except UnknownScoringModeError as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail=str(e))

    return ScoreSummaryOut(**asdict(summary))
