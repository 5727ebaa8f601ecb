from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session
from fantaf1.db.session import get_db
from fantaf1.db.models.user import User
from fantaf1.schemas.leaderboard import (
    EventLeaderboardOut,
    EventLeaderboardRowOut,
    LeaderboardRowOut,
    SeasonLeaderboardOut,
)
from fantaf1.core.deps import get_current_user
from fantaf1.core.errors import NotFoundError
from fantaf1.services.event_scores import event_leaderboard, season_leaderboard

router = APIRouter(prefix="/standings", tags=["Standings"])


def _usernames(db: Session, user_ids) -> dict:
    if not user_ids:
        return {}
    return dict(db.query(User.id, User.username).filter(User.id.in_(list(user_ids))).all())


@router.get("/season/{season_id}", response_model=SeasonLeaderboardOut)
def individual_season_standings(
    season_id: int,
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    try:
        season, rows = season_leaderboard(db, season_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Temporada no encontrada")

    names = _usernames(db, [r.user_id for r in rows])
    return SeasonLeaderboardOut(
        season_id=season.id,
        scoring_type=season.scoring_type,
        leaderboard=[
            LeaderboardRowOut(
                rank=r.rank,
                user_id=r.user_id,
                username=names.get(r.user_id),
                total_points=r.total_points,
                event_count=r.event_count,
                average_points=r.average_points,
            )
            for r in rows
        ],
    )


@router.get("/event/{event_id}", response_model=EventLeaderboardOut)
def event_standings(
    event_id: int,
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    try:
        event, rows = event_leaderboard(db, event_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Evento no encontrado")

    names = _usernames(db, [r.user_id for r in rows])
    return EventLeaderboardOut(
        event_id=event.id,
        event_name=event.name,
        scoring_type=event.season.scoring_type,
        leaderboard=[
            EventLeaderboardRowOut(
                rank=r.rank,
                user_id=r.user_id,
                username=names.get(r.user_id),
                points=r.points,
            )
            for r in rows
        ],
    )
