from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from fantaf1.db.session import Base

class Driver(Base):
    __tablename__ = "drivers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(3), unique=True, index=True, nullable=False) # Ej: ALO
    name: Mapped[str] = mapped_column(String, nullable=False) # Ej: Fernando Alonso
    team: Mapped[str | None] = mapped_column(String, nullable=True)
    number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True)
