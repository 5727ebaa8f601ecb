from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from fantaf1.db.session import get_db
from fantaf1.db.models.season import Season
from fantaf1.schemas.season import SeasonOut
from fantaf1.core.deps import get_current_user

router = APIRouter(prefix="/seasons", tags=["Seasons (Public)"])

@router.get("/", response_model=list[SeasonOut])
def get_seasons(db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return db.query(Season).order_by(Season.year.desc()).all()

@router.get("/active", response_model=SeasonOut)
def get_active_season(db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    # El modo de puntuación se pasa siempre explícito al motor; esto es solo para el front
    season = db.query(Season).filter(Season.is_active.is_(True)).first()
    if not season:
        raise HTTPException(status_code=404, detail="No hay temporada activa")
    return season
