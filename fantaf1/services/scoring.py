"""
Motor de puntuación de FantaF1.

Funciones puras: reciben resultados y predicciones como datos planos y
devuelven puntos o filas de clasificación. Aquí no se toca la base de datos;
eso lo hace fantaf1.services.event_scores.

Dos modos por temporada:
  - LEGACY_TOP3: premio (más es mejor). Solo cuenta el podio.
  - FULL_GRID_DIFF: coste (menos es mejor, 0 = perfecto). Suma de la
    diferencia de posición de cada piloto en toda la parrilla.
"""
import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Hashable, Iterable, Optional, Sequence, Union

from fantaf1.core.errors import UnknownScoringModeError

logger = logging.getLogger(__name__)

DriverId = Hashable


# ==============================================================================
# 0. ENUMS
# ==============================================================================

class ScoringMode(str, enum.Enum):
    LEGACY_TOP3 = "LEGACY_TOP3"
    FULL_GRID_DIFF = "FULL_GRID_DIFF"

    @classmethod
    def parse(cls, value) -> "ScoringMode":
        # Nunca caemos a un modo por defecto: premio y coste van al revés
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownScoringModeError(value) from None

    @property
    def lower_is_better(self) -> bool:
        return self is ScoringMode.FULL_GRID_DIFF


class EventType(str, enum.Enum):
    RACE = "RACE"
    SPRINT = "SPRINT"

    @classmethod
    def parse(cls, value) -> "EventType":
        if isinstance(value, cls):
            return value
        return cls(value)


class EventStatus(str, enum.Enum):
    UPCOMING = "UPCOMING"
    CLOSED = "CLOSED"        # Cerrado, esperando resultados / puntuación
    COMPLETED = "COMPLETED"  # Puntuado


# ==============================================================================
# 1. RESULTADOS Y PREDICCIONES (variantes por modo)
# ==============================================================================

@dataclass(frozen=True)
class _Podium:
    first: Optional[DriverId] = None
    second: Optional[DriverId] = None
    third: Optional[DriverId] = None

    @property
    def slots(self) -> tuple:
        return (self.first, self.second, self.third)

    @property
    def is_complete(self) -> bool:
        return all(slot is not None for slot in self.slots)


@dataclass(frozen=True)
class _Ordering:
    order: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "order", tuple(self.order))


class LegacyTop3Result(_Podium):
    pass


class FullGridResult(_Ordering):
    pass


class LegacyTop3Prediction(_Podium):
    pass


class FullGridPrediction(_Ordering):
    pass


EventResult = Union[LegacyTop3Result, FullGridResult]
PredictionInput = Union[LegacyTop3Prediction, FullGridPrediction]


def _podium_from_order(order: Sequence) -> tuple:
    top = list(order[:3])
    return tuple(top + [None] * (3 - len(top)))


def _order_from_podium(slots: Sequence) -> tuple:
    return tuple(slot for slot in slots if slot is not None)


def normalize_result(result: EventResult, scoring_mode) -> EventResult:
    """
    Convierte el resultado a la variante que usa el modo.

    FULL_GRID_DIFF acepta un podio antiguo (eventos de antes del modo de
    parrilla completa) y LEGACY_TOP3 se queda con los tres primeros de un
    orden completo.
    """
    mode = ScoringMode.parse(scoring_mode)
    if mode is ScoringMode.LEGACY_TOP3:
        if isinstance(result, LegacyTop3Result):
            return result
        if isinstance(result, FullGridResult):
            return LegacyTop3Result(*_podium_from_order(result.order))
    else:
        if isinstance(result, FullGridResult):
            return result
        if isinstance(result, LegacyTop3Result):
            return FullGridResult(_order_from_podium(result.slots))
    raise TypeError(f"Resultado no soportado: {type(result).__name__}")


def normalize_prediction(prediction: PredictionInput, scoring_mode) -> PredictionInput:
    """Igual que normalize_result, para predicciones."""
    mode = ScoringMode.parse(scoring_mode)
    if mode is ScoringMode.LEGACY_TOP3:
        if isinstance(prediction, LegacyTop3Prediction):
            return prediction
        if isinstance(prediction, FullGridPrediction):
            return LegacyTop3Prediction(*_podium_from_order(prediction.order))
    else:
        if isinstance(prediction, FullGridPrediction):
            return prediction
        if isinstance(prediction, LegacyTop3Prediction):
            return FullGridPrediction(_order_from_podium(prediction.slots))
    raise TypeError(f"Predicción no soportada: {type(prediction).__name__}")


# ==============================================================================
# 2. CONFIGURACIÓN DE PUNTOS
# ==============================================================================

def _default_event_weights():
    return {EventType.RACE: 1.0, EventType.SPRINT: 0.5}


@dataclass(frozen=True)
class ScoringConfig:
    first_points: int = 25
    second_points: int = 15
    third_points: int = 10
    wrong_position_points: int = 5
    event_weights: dict = field(default_factory=_default_event_weights)
    missing_driver_penalty: int = 20
    # Coste de "sin predicción" y de una predicción sin ningún piloto en común
    worst_score: int = 1000

    @classmethod
    def from_settings(cls, settings) -> "ScoringConfig":
        return cls(
            first_points=settings.legacy_first_points,
            second_points=settings.legacy_second_points,
            third_points=settings.legacy_third_points,
            wrong_position_points=settings.legacy_wrong_position_points,
            event_weights={
                EventType.RACE: settings.race_weight,
                EventType.SPRINT: settings.sprint_weight,
            },
            missing_driver_penalty=settings.missing_driver_penalty,
            worst_score=settings.worst_score,
        )

    @property
    def exact_points(self) -> tuple:
        return (self.first_points, self.second_points, self.third_points)

    def weight_for(self, event_type) -> float:
        return self.event_weights[EventType.parse(event_type)]


def _round_half_up(value) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# ==============================================================================
# 3. VALIDACIÓN
# ==============================================================================

def validate_event_results(result: EventResult, scoring_mode) -> bool:
    """
    ¿Se puede puntuar este resultado? Solo consulta: no lanza ni modifica.
    Un modo desconocido también devuelve False.
    """
    try:
        mode = ScoringMode.parse(scoring_mode)
    except UnknownScoringModeError:
        logger.error(f"validate_event_results con modo desconocido: {scoring_mode!r}")
        return False

    if result is None:
        return False

    if mode is ScoringMode.LEGACY_TOP3:
        if isinstance(result, LegacyTop3Result):
            return result.is_complete
        if isinstance(result, FullGridResult):
            return len(result.order) >= 3
        return False

    if isinstance(result, FullGridResult):
        return len(result.order) > 0
    if isinstance(result, LegacyTop3Result):
        return result.is_complete
    return False


def validate_prediction(prediction: PredictionInput) -> bool:
    """Sin pilotos repetidos; podio con los tres huecos o un orden no vacío."""
    if isinstance(prediction, LegacyTop3Prediction):
        if not prediction.is_complete:
            return False
        drivers = prediction.slots
    elif isinstance(prediction, FullGridPrediction):
        drivers = prediction.order
        if not drivers:
            return False
    else:
        return False
    return len(set(drivers)) == len(drivers)


def can_make_prediction(status, closing_date: datetime, now: Optional[datetime] = None) -> bool:
    """Solo se puede predecir mientras el evento está UPCOMING y antes del cierre."""
    if now is None:
        now = datetime.now(timezone.utc)
        if closing_date.tzinfo is None:
            now = now.replace(tzinfo=None)
    return status == EventStatus.UPCOMING.value and now < closing_date


# ==============================================================================
# 4. PUNTUACIÓN
# ==============================================================================

def _score_legacy_top3(prediction: LegacyTop3Prediction, result: LegacyTop3Result, config: ScoringConfig) -> int:
    actual = result.slots
    total = 0
    # Cada hueco cuenta por separado
    for index, driver in enumerate(prediction.slots):
        if driver is None:
            continue
        if actual[index] == driver:
            total += config.exact_points[index]
        elif driver in actual:
            total += config.wrong_position_points
    return total


def _score_full_grid(prediction: FullGridPrediction, result: FullGridResult, config: ScoringConfig) -> Optional[int]:
    actual_index = {}
    for index, driver in enumerate(result.order):
        actual_index.setdefault(driver, index)

    seen = set()
    common = 0
    cost = 0
    for predicted_index, driver in enumerate(prediction.order):
        # Repetidos: vale la primera aparición
        if driver in seen:
            continue
        seen.add(driver)

        if driver in actual_index:
            common += 1
            cost += abs(predicted_index - actual_index[driver])
        else:
            # No está en el resultado (DNF, no participó...)
            cost += config.missing_driver_penalty

    if common == 0:
        return None
    return cost


def calculate_score(
    prediction: PredictionInput,
    result: EventResult,
    event_type,
    scoring_mode,
    config: Optional[ScoringConfig] = None,
) -> int:
    """
    Puntos de una predicción.

    LEGACY_TOP3: suma de aciertos exactos más los pilotos del podio en otro
    hueco, escalada por el peso del tipo de evento (SPRINT = mitad).

    FULL_GRID_DIFF: suma de |posición predicha - posición real| de los
    pilotos en común, más una penalización fija por cada piloto predicho que
    no está en el resultado. Sin ningún piloto en común devuelve
    config.worst_score, igual que "sin predicción" en la clasificación.

    Ambos se redondean a entero (mitad hacia arriba).
    """
    mode = ScoringMode.parse(scoring_mode)
    config = config or ScoringConfig()
    weight = config.weight_for(event_type)

    prediction = normalize_prediction(prediction, mode)
    result = normalize_result(result, mode)

    if mode is ScoringMode.LEGACY_TOP3:
        raw = _score_legacy_top3(prediction, result, config)
        points = _round_half_up(raw * weight)
    else:
        raw = _score_full_grid(prediction, result, config)
        if raw is None:
            points = config.worst_score
        else:
            points = min(_round_half_up(raw * weight), config.worst_score)

    logger.debug(f"calculate_score {mode.value}/{EventType.parse(event_type).value}: raw={raw} points={points}")
    return points


# ==============================================================================
# 5. CLASIFICACIONES
# ==============================================================================

@dataclass
class ScoredPrediction:
    user_id: Hashable
    points: Optional[int]
    event_id: Optional[Hashable] = None


@dataclass
class LeaderboardRow:
    user_id: Hashable
    total_points: int
    event_count: int
    average_points: float
    rank: int


@dataclass
class EventLeaderboardRow:
    user_id: Hashable
    points: Optional[int]
    rank: int


def calculate_leaderboard(predictions: Iterable, scoring_mode) -> list[LeaderboardRow]:
    """
    Clasificación general agrupando por usuario.

    Las predicciones sin puntuar (points = None) no suman ni cuentan; un
    usuario que solo tiene predicciones sin puntuar no aparece. En empate se
    mantiene el orden de llegada (sort estable) y el puesto es siempre
    consecutivo: dos empatados quedan 1º y 2º, no 1º y 1º.
    """
    mode = ScoringMode.parse(scoring_mode)

    totals = {}
    for prediction in predictions:
        if prediction.points is None:
            continue
        entry = totals.setdefault(prediction.user_id, [0, 0])
        entry[0] += prediction.points
        entry[1] += 1

    ordered = sorted(
        totals.items(),
        key=lambda item: item[1][0],
        reverse=not mode.lower_is_better,
    )

    return [
        LeaderboardRow(
            user_id=user_id,
            total_points=total,
            event_count=count,
            average_points=round(total / count, 2),
            rank=position,
        )
        for position, (user_id, (total, count)) in enumerate(ordered, start=1)
    ]


def calculate_event_leaderboard(entries: Iterable, scoring_mode, config: Optional[ScoringConfig] = None) -> list[EventLeaderboardRow]:
    """
    Clasificación de un solo evento. entries: pares (user_id, points).

    Sin puntos cuenta como config.worst_score en FULL_GRID_DIFF y va al final
    en LEGACY_TOP3.
    """
    mode = ScoringMode.parse(scoring_mode)
    config = config or ScoringConfig()

    def sort_key(entry):
        _, points = entry
        if mode.lower_is_better:
            return config.worst_score if points is None else points
        return float("inf") if points is None else -points

    ordered = sorted(entries, key=sort_key)
    return [
        EventLeaderboardRow(user_id=user_id, points=points, rank=position)
        for position, (user_id, points) in enumerate(ordered, start=1)
    ]


@dataclass
class ScoreSummary:
    count: int = 0
    average: float = 0.0
    max: Optional[int] = None
    min: Optional[int] = None


def summarize_scores(points: Sequence[int]) -> ScoreSummary:
    points = list(points)
    if not points:
        return ScoreSummary()
    return ScoreSummary(
        count=len(points),
        average=round(sum(points) / len(points), 2),
        max=max(points),
        min=min(points),
    )
