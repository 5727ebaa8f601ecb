from datetime import datetime, timedelta

import pytest

from fantaf1.core.errors import UnknownScoringModeError
from fantaf1.services.scoring import (
    FullGridPrediction,
    FullGridResult,
    LegacyTop3Prediction,
    LegacyTop3Result,
    ScoredPrediction,
    ScoringConfig,
    calculate_event_leaderboard,
    calculate_leaderboard,
    calculate_score,
    can_make_prediction,
    normalize_prediction,
    normalize_result,
    summarize_scores,
    validate_event_results,
    validate_prediction,
)

LEGACY = "LEGACY_TOP3"
FULL = "FULL_GRID_DIFF"


# --- LEGACY_TOP3 ---

def test_legacy_perfect_match_race():
    score = calculate_score(
        LegacyTop3Prediction("VER", "NOR", "LEC"),
        LegacyTop3Result("VER", "NOR", "LEC"),
        "RACE",
        LEGACY,
    )
    assert score == 25 + 15 + 10


def test_legacy_perfect_match_sprint_is_half():
    score = calculate_score(
        LegacyTop3Prediction("VER", "NOR", "LEC"),
        LegacyTop3Result("VER", "NOR", "LEC"),
        "SPRINT",
        LEGACY,
    )
    assert score == 25


def test_legacy_partial_match():
    # 1º exacto (25), LEC en el podio pero en otro hueco (5), HAM fuera (0)
    score = calculate_score(
        LegacyTop3Prediction("VER", "LEC", "HAM"),
        LegacyTop3Result("VER", "NOR", "LEC"),
        "RACE",
        LEGACY,
    )
    assert score == 30


def test_legacy_all_wrong_slots():
    score = calculate_score(
        LegacyTop3Prediction("LEC", "VER", "NOR"),
        LegacyTop3Result("VER", "NOR", "LEC"),
        "RACE",
        LEGACY,
    )
    assert score == 15


def test_legacy_sprint_rounds_half_up():
    # 5 * 0.5 = 2.5 -> 3
    score = calculate_score(
        LegacyTop3Prediction("NOR", "HAM", "PIA"),
        LegacyTop3Result("VER", "NOR", "LEC"),
        "SPRINT",
        LEGACY,
    )
    assert score == 3


def test_legacy_no_match_is_zero():
    score = calculate_score(
        LegacyTop3Prediction("HAM", "PIA", "ALO"),
        LegacyTop3Result("VER", "NOR", "LEC"),
        "RACE",
        LEGACY,
    )
    assert score == 0


def test_legacy_duplicate_slots_are_scored_independently():
    score = calculate_score(
        LegacyTop3Prediction("VER", "VER", "VER"),
        LegacyTop3Result("VER", "NOR", "LEC"),
        "RACE",
        LEGACY,
    )
    assert score == 25 + 5 + 5


def test_legacy_custom_weight_table():
    config = ScoringConfig(first_points=10, second_points=6, third_points=4, wrong_position_points=1)
    score = calculate_score(
        LegacyTop3Prediction("VER", "LEC", "NOR"),
        LegacyTop3Result("VER", "NOR", "LEC"),
        "RACE",
        LEGACY,
        config,
    )
    assert score == 10 + 1 + 1


# --- FULL_GRID_DIFF ---

def test_full_grid_identical_ranking_is_zero():
    order = ["VER", "NOR", "LEC", "HAM", "PIA"]
    assert calculate_score(FullGridPrediction(order), FullGridResult(order), "RACE", FULL) == 0


def test_full_grid_swapped_pair():
    score = calculate_score(
        FullGridPrediction(["VER", "NOR", "LEC"]),
        FullGridResult(["VER", "LEC", "NOR"]),
        "RACE",
        FULL,
    )
    assert score == 2


@pytest.mark.parametrize("n", [2, 3, 4, 5, 10, 20])
def test_full_grid_reversed_ranking_is_maximum_displacement(n):
    order = list(range(n))
    score = calculate_score(
        FullGridPrediction(list(reversed(order))),
        FullGridResult(order),
        "RACE",
        FULL,
    )
    assert score == (n * n) // 2


def test_full_grid_empty_overlap_returns_worst_score():
    score = calculate_score(
        FullGridPrediction(["HAM", "PIA"]),
        FullGridResult(["VER", "NOR", "LEC"]),
        "RACE",
        FULL,
    )
    assert score == 1000


def test_full_grid_empty_prediction_returns_worst_score():
    assert calculate_score(FullGridPrediction([]), FullGridResult(["VER"]), "RACE", FULL) == 1000


def test_full_grid_predicted_driver_missing_from_result_is_penalized():
    # HAM no terminó: penalización fija de 20
    score = calculate_score(
        FullGridPrediction(["VER", "NOR", "HAM"]),
        FullGridResult(["VER", "NOR"]),
        "RACE",
        FULL,
    )
    assert score == 20


def test_full_grid_unpredicted_result_driver_costs_nothing():
    score = calculate_score(
        FullGridPrediction(["VER", "NOR"]),
        FullGridResult(["VER", "NOR", "LEC"]),
        "RACE",
        FULL,
    )
    assert score == 0


def test_full_grid_sprint_halves_cost():
    score = calculate_score(
        FullGridPrediction(["VER", "NOR", "LEC"]),
        FullGridResult(["VER", "LEC", "NOR"]),
        "SPRINT",
        FULL,
    )
    assert score == 1


def test_full_grid_duplicate_driver_first_occurrence_wins():
    score = calculate_score(
        FullGridPrediction(["VER", "VER", "NOR"]),
        FullGridResult(["VER", "NOR"]),
        "RACE",
        FULL,
    )
    # VER en 0 (0), el repetido se ignora, NOR predicho en 2 y real en 1 (1)
    assert score == 1


def test_full_grid_falls_back_to_legacy_fields():
    score = calculate_score(
        LegacyTop3Prediction("VER", "NOR", "LEC"),
        LegacyTop3Result("VER", "LEC", "NOR"),
        "RACE",
        FULL,
    )
    assert score == 2


def test_full_grid_never_exceeds_worst_score():
    config = ScoringConfig(missing_driver_penalty=600)
    score = calculate_score(
        FullGridPrediction(["VER", "HAM", "PIA"]),
        FullGridResult(["VER"]),
        "RACE",
        FULL,
        config,
    )
    assert score == config.worst_score


# --- Comunes ---

@pytest.mark.parametrize("mode", [LEGACY, FULL])
def test_score_is_deterministic(mode):
    prediction = FullGridPrediction(["LEC", "VER", "HAM", "NOR"])
    result = FullGridResult(["VER", "NOR", "LEC", "PIA"])
    first = calculate_score(prediction, result, "RACE", mode)
    assert all(calculate_score(prediction, result, "RACE", mode) == first for _ in range(5))


def test_unknown_scoring_mode_is_rejected():
    with pytest.raises(UnknownScoringModeError):
        calculate_score(
            LegacyTop3Prediction("VER", "NOR", "LEC"),
            LegacyTop3Result("VER", "NOR", "LEC"),
            "RACE",
            "BEST_GUESS",
        )


def test_unknown_event_type_is_rejected():
    with pytest.raises(ValueError):
        calculate_score(
            LegacyTop3Prediction("VER", "NOR", "LEC"),
            LegacyTop3Result("VER", "NOR", "LEC"),
            "QUALIFYING",
            LEGACY,
        )


# --- Normalización ---

def test_normalize_full_order_to_podium():
    assert normalize_result(FullGridResult(["VER", "NOR", "LEC", "HAM"]), LEGACY) == LegacyTop3Result("VER", "NOR", "LEC")
    assert normalize_prediction(FullGridPrediction(["VER"]), LEGACY) == LegacyTop3Prediction("VER", None, None)


def test_normalize_podium_to_full_order():
    assert normalize_result(LegacyTop3Result("VER", None, "LEC"), FULL) == FullGridResult(("VER", "LEC"))
    assert normalize_prediction(LegacyTop3Prediction("VER", "NOR", "LEC"), FULL) == FullGridPrediction(("VER", "NOR", "LEC"))


# --- Validación ---

def test_validate_legacy_requires_all_three_slots():
    assert validate_event_results(LegacyTop3Result("VER"), LEGACY) is False
    assert validate_event_results(LegacyTop3Result("VER", "NOR", "LEC"), LEGACY) is True


def test_validate_legacy_accepts_full_order_with_podium():
    assert validate_event_results(FullGridResult(["VER", "NOR", "LEC"]), LEGACY) is True
    assert validate_event_results(FullGridResult(["VER", "NOR"]), LEGACY) is False


def test_validate_full_grid():
    assert validate_event_results(FullGridResult(["VER"]), FULL) is True
    assert validate_event_results(FullGridResult([]), FULL) is False
    # Eventos antiguos sin orden completo
    assert validate_event_results(LegacyTop3Result("VER", "NOR", "LEC"), FULL) is True
    assert validate_event_results(LegacyTop3Result("VER", "NOR"), FULL) is False


def test_validate_never_raises():
    assert validate_event_results(None, LEGACY) is False
    assert validate_event_results(LegacyTop3Result("VER", "NOR", "LEC"), "NOPE") is False


def test_validate_prediction():
    assert validate_prediction(LegacyTop3Prediction("VER", "NOR", "LEC")) is True
    assert validate_prediction(LegacyTop3Prediction("VER", "VER", "LEC")) is False
    assert validate_prediction(LegacyTop3Prediction("VER", "NOR")) is False
    assert validate_prediction(FullGridPrediction(["VER", "NOR"])) is True
    assert validate_prediction(FullGridPrediction(["VER", "NOR", "VER"])) is False
    assert validate_prediction(FullGridPrediction([])) is False


def test_can_make_prediction():
    now = datetime(2025, 9, 7, 12, 0)
    closing = now + timedelta(hours=1)
    assert can_make_prediction("UPCOMING", closing, now) is True
    assert can_make_prediction("UPCOMING", now - timedelta(minutes=1), now) is False
    assert can_make_prediction("CLOSED", closing, now) is False


# --- Clasificaciones ---

def _predictions(totals):
    return [ScoredPrediction(user_id=user_id, points=points) for user_id, points in totals]


def test_leaderboard_legacy_sorts_descending():
    rows = calculate_leaderboard(_predictions([(1, 10), (2, 30), (3, 20)]), LEGACY)
    assert [r.total_points for r in rows] == [30, 20, 10]
    assert [r.rank for r in rows] == [1, 2, 3]


def test_leaderboard_full_grid_sorts_ascending():
    rows = calculate_leaderboard(_predictions([(1, 10), (2, 30), (3, 20)]), FULL)
    assert [r.total_points for r in rows] == [10, 20, 30]
    assert [r.user_id for r in rows] == [1, 3, 2]


def test_leaderboard_aggregates_per_user():
    rows = calculate_leaderboard(_predictions([(1, 10), (2, 5), (1, 15), (2, 5)]), LEGACY)
    assert rows[0].user_id == 1
    assert rows[0].total_points == 25
    assert rows[0].event_count == 2
    assert rows[0].average_points == 12.5
    assert rows[1].total_points == 10


def test_leaderboard_excludes_unscored_predictions():
    rows = calculate_leaderboard(_predictions([(1, None), (2, 5), (2, None)]), LEGACY)
    # El usuario 1 solo tiene predicciones sin puntuar: no aparece
    assert [r.user_id for r in rows] == [2]
    assert rows[0].total_points == 5
    assert rows[0].event_count == 1


def test_leaderboard_ties_keep_input_order_and_consecutive_ranks():
    rows = calculate_leaderboard(_predictions([(3, 20), (1, 20), (2, 50)]), LEGACY)
    assert [r.user_id for r in rows] == [2, 3, 1]
    assert [r.rank for r in rows] == [1, 2, 3]


def test_event_leaderboard_missing_points_equal_worst_score():
    rows = calculate_event_leaderboard([(1, None), (2, 999), (3, 1000), (4, 3)], FULL)
    assert [r.user_id for r in rows] == [4, 2, 1, 3]
    assert rows[2].points is None


def test_event_leaderboard_legacy_missing_points_go_last():
    rows = calculate_event_leaderboard([(1, None), (2, 0), (3, 40)], LEGACY)
    assert [r.user_id for r in rows] == [3, 2, 1]
    assert [r.rank for r in rows] == [1, 2, 3]


def test_summarize_scores():
    summary = summarize_scores([50, 30, 10])
    assert (summary.count, summary.average, summary.max, summary.min) == (3, 30.0, 50, 10)
    assert summarize_scores([]).count == 0
