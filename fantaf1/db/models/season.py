from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import List, TYPE_CHECKING
from fantaf1.db.session import Base
from fantaf1.services.scoring import ScoringMode

if TYPE_CHECKING:
    from fantaf1.db.models.event import Event

class Season(Base):
    __tablename__ = "seasons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False)
    # Fijo una vez puntuado el primer evento de la temporada
    scoring_type: Mapped[str] = mapped_column(String, default=ScoringMode.LEGACY_TOP3.value, nullable=False)

    events: Mapped[List["Event"]] = relationship("Event", back_populates="season")
