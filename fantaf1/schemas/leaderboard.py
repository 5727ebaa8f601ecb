from pydantic import BaseModel
from typing import Optional

class ScoreSummaryOut(BaseModel):
    count: int
    average: float
    max: Optional[int] = None
    min: Optional[int] = None

class LeaderboardRowOut(BaseModel):
    rank: int
    user_id: int
    username: Optional[str] = None
    total_points: int
    event_count: int
    average_points: float

class SeasonLeaderboardOut(BaseModel):
    season_id: int
    scoring_type: str
    leaderboard: list[LeaderboardRowOut]

class EventLeaderboardRowOut(BaseModel):
    rank: int
    user_id: int
    username: Optional[str] = None
    points: Optional[int] = None

class EventLeaderboardOut(BaseModel):
    event_id: int
    event_name: str
    scoring_type: str
    leaderboard: list[EventLeaderboardRowOut]
