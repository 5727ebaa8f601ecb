from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional

class PredictionCreate(BaseModel):
    first_place_id: Optional[int] = None
    second_place_id: Optional[int] = None
    third_place_id: Optional[int] = None
    rankings: Optional[list[int]] = None  # Orden completo (FULL_GRID_DIFF)

class PredictionOut(BaseModel):
    id: int
    user_id: int
    event_id: int
    first_place_id: Optional[int] = None
    second_place_id: Optional[int] = None
    third_place_id: Optional[int] = None
    rankings: Optional[list[int]] = None
    points: Optional[int] = None
    is_autofilled: bool = False
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

# Resultados (admin)
class ResultsUpdate(BaseModel):
    first_place_id: Optional[int] = None
    second_place_id: Optional[int] = None
    third_place_id: Optional[int] = None
    results: Optional[list[int]] = None

class FetchedResults(BaseModel):
    codes: list[str]
    driver_ids: list[int]
    unknown_codes: list[str] = []

class ApplyFetchedResults(BaseModel):
    driver_ids: list[int]
