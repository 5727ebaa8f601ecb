# fantaf1/db/models/event.py
from datetime import datetime
from sqlalchemy import Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import List, TYPE_CHECKING
from fantaf1.db.session import Base
from fantaf1.services.scoring import EventType, EventStatus

if TYPE_CHECKING:
    from fantaf1.db.models.season import Season
    from fantaf1.db.models.prediction import Prediction
    from fantaf1.db.models.driver import Driver


class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    season_id: Mapped[int] = mapped_column(Integer, ForeignKey("seasons.id"), nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    type: Mapped[str] = mapped_column(String, default=EventType.RACE.value, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    closing_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[str] = mapped_column(String, default=EventStatus.UPCOMING.value, nullable=False)

    # Podio (LEGACY_TOP3)
    first_place_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("drivers.id"), nullable=True)
    second_place_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("drivers.id"), nullable=True)
    third_place_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("drivers.id"), nullable=True)
    # Orden completo de llegada (FULL_GRID_DIFF), índice 0 = ganador
    results: Mapped[list[int] | None] = mapped_column(JSON, nullable=True)

    # Relaciones
    season: Mapped["Season"] = relationship("Season", back_populates="events")
    predictions: Mapped[List["Prediction"]] = relationship("Prediction", back_populates="event")
    first_place: Mapped["Driver"] = relationship("Driver", foreign_keys=[first_place_id])
    second_place: Mapped["Driver"] = relationship("Driver", foreign_keys=[second_place_id])
    third_place: Mapped["Driver"] = relationship("Driver", foreign_keys=[third_place_id])
