import logging
import os

import fastf1
import pandas as pd
from sqlalchemy import select
from sqlalchemy.orm import Session

from fantaf1.core.config import settings
from fantaf1.core.errors import InvalidResultsError, ResultsFeedError
from fantaf1.db.models.driver import Driver
from fantaf1.db.models.event import Event
from fantaf1.services.scoring import EventStatus, EventType

logger = logging.getLogger(__name__)

# Nombre en nuestra BD -> nombre que entiende FastF1
DB_TO_API_MAP = {
    "Gran Premio d'Australia": "Australia",
    "Gran Premio della Cina": "China",
    "Gran Premio del Giappone": "Japan",
    "Gran Premio del Bahrain": "Bahrain",
    "Gran Premio dell'Arabia Saudita": "Saudi Arabia",
    "Gran Premio di Miami": "Miami",
    "Gran Premio dell'Emilia-Romagna": "Imola",
    "Gran Premio di Monaco": "Monaco",
    "Gran Premio di Spagna": "Spain",
    "Gran Premio del Canada": "Canada",
    "Gran Premio d'Austria": "Austria",
    "Gran Premio di Gran Bretagna": "Great Britain",
    "Gran Premio del Belgio": "Belgium",
    "Gran Premio d'Ungheria": "Hungary",
    "Gran Premio d'Olanda": "Netherlands",
    "Gran Premio d'Italia": "Italy",
    "Gran Premio dell'Azerbaigian": "Azerbaijan",
    "Gran Premio di Singapore": "Singapore",
    "Gran Premio degli Stati Uniti": "United States",
    "Gran Premio del Messico": "Mexico",
    "Gran Premio del Brasile": "Brazil",
    "Gran Premio di Las Vegas": "Las Vegas",
    "Gran Premio del Qatar": "Qatar",
    "Gran Premio di Abu Dhabi": "Abu Dhabi",
}

SESSION_CODES = {
    EventType.RACE: "R",
    EventType.SPRINT: "S",
}


def enable_cache(cache_dir: str | None = None):
    cache_dir = cache_dir or settings.fastf1_cache_dir
    os.makedirs(cache_dir, exist_ok=True)
    fastf1.Cache.enable_cache(cache_dir)


def build_finishing_order(results: pd.DataFrame, include_unclassified: bool = True) -> list[str]:
    """
    Orden de llegada (abreviaturas) a partir de session.results de FastF1.

    ClassifiedPosition es '1', '2'... o 'R', 'D', 'N', 'W' para los no
    clasificados. Esos van al final en el orden de Position.
    """
    if results is None or results.empty:
        return []

    frame = results.copy()
    frame["_classified"] = pd.to_numeric(
        frame["ClassifiedPosition"].astype(str), errors="coerce"
    ) if "ClassifiedPosition" in frame.columns else float("nan")

    if "Position" in frame.columns:
        frame["_position"] = pd.to_numeric(frame["Position"], errors="coerce")
    else:
        frame["_position"] = range(len(frame))

    if not include_unclassified:
        frame = frame[frame["_classified"].notna()]

    frame = frame.sort_values(
        by=["_classified", "_position"],
        na_position="last",
        kind="stable",
    )
    return [str(code) for code in frame["Abbreviation"].tolist()]


def fetch_event_order(year: int, event_name: str, event_type=EventType.RACE, include_unclassified: bool = True) -> list[str]:
    api_name = DB_TO_API_MAP.get(event_name, event_name)
    session_code = SESSION_CODES[EventType.parse(event_type)]
    logger.info(f"Descargando resultados FastF1: {year} '{api_name}' ({session_code})")

    try:
        enable_cache()
        session = fastf1.get_session(year, api_name, session_code)
        session.load(laps=False, telemetry=False, weather=False, messages=False)
        order = build_finishing_order(session.results, include_unclassified)
    except Exception as e:
        logger.exception(f"Error descargando resultados de {api_name} {year}")
        raise ResultsFeedError(str(e)) from e

    if not order:
        raise ResultsFeedError(f"Tabla de resultados vacía para {api_name} {year}")
    return order


def map_codes_to_drivers(db: Session, codes: list[str]) -> tuple[list[int], list[str]]:
    """Devuelve (driver_ids en orden, códigos que no conocemos)."""
    drivers = db.execute(select(Driver)).scalars().all()
    by_code = {d.code.upper(): d.id for d in drivers}

    driver_ids = []
    unknown = []
    for code in codes:
        driver_id = by_code.get(code.upper())
        if driver_id is None:
            unknown.append(code)
        else:
            driver_ids.append(driver_id)

    if unknown:
        logger.warning(f"Pilotos sin mapear: {', '.join(unknown)}")
    return driver_ids, unknown


def unknown_driver_ids(db: Session, driver_ids: list[int]) -> list[int]:
    """Ids que no corresponden a ningún piloto activo."""
    wanted = {d for d in driver_ids if d is not None}
    if not wanted:
        return []
    known = set(
        db.execute(
            select(Driver.id).where(Driver.id.in_(wanted), Driver.active.is_(True))
        ).scalars()
    )
    return sorted(wanted - known)


def apply_results(db: Session, event: Event, driver_ids: list[int]) -> Event:
    """Guarda el orden completo y el podio derivado. El evento queda pendiente de puntuar."""
    if not driver_ids:
        raise InvalidResultsError("El orden de llegada está vacío")
    if len(set(driver_ids)) != len(driver_ids):
        raise InvalidResultsError("Piloto repetido en el orden de llegada")
    unknown = unknown_driver_ids(db, driver_ids)
    if unknown:
        raise InvalidResultsError(f"Pilotos desconocidos o inactivos: {unknown}")

    podium = list(driver_ids[:3]) + [None] * (3 - min(len(driver_ids), 3))

    event.results = list(driver_ids)
    event.first_place_id, event.second_place_id, event.third_place_id = podium
    if event.status == EventStatus.UPCOMING.value:
        event.status = EventStatus.CLOSED.value

    db.commit()
    db.refresh(event)
    logger.info(f"Resultados guardados para {event.name}: {len(driver_ids)} pilotos")
    return event
