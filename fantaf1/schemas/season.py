from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional
from fantaf1.services.scoring import ScoringMode, EventType

# Esquemas para Temporadas
class SeasonBase(BaseModel):
    year: int
    name: str
    is_active: bool = False
    scoring_type: ScoringMode = ScoringMode.LEGACY_TOP3

class SeasonCreate(SeasonBase):
    pass

class SeasonUpdate(BaseModel):
    name: Optional[str] = None
    is_active: Optional[bool] = None
    scoring_type: Optional[ScoringMode] = None

class SeasonOut(SeasonBase):
    id: int
    model_config = ConfigDict(from_attributes=True)

# Esquemas para Eventos
class EventCreate(BaseModel):
    season_id: int
    name: str
    type: EventType = EventType.RACE
    date: datetime
    closing_date: datetime

class EventOut(BaseModel):
    id: int
    season_id: int
    name: str
    type: EventType
    date: datetime
    closing_date: datetime
    status: str
    first_place_id: Optional[int] = None
    second_place_id: Optional[int] = None
    third_place_id: Optional[int] = None
    results: Optional[list[int]] = None
    model_config = ConfigDict(from_attributes=True)

# Pilotos
class DriverCreate(BaseModel):
    code: str
    name: str
    team: Optional[str] = None
    number: Optional[int] = None

class DriverOut(DriverCreate):
    id: int
    active: bool = True
    model_config = ConfigDict(from_attributes=True)
