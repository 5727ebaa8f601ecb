class ScoringError(Exception):
    """Base de todos los errores del motor de puntuación."""


class UnknownScoringModeError(ScoringError, ValueError):
    def __init__(self, mode):
        self.mode = mode
        super().__init__(f"Modo de puntuación desconocido: {mode!r}")


class IncompleteResultsError(ScoringError):
    def __init__(self, event_id, scoring_mode):
        self.event_id = event_id
        self.scoring_mode = scoring_mode
        super().__init__(
            f"Resultados incompletos para el evento {event_id} ({scoring_mode})"
        )


class InvalidResultsError(ScoringError, ValueError):
    pass


class NotFoundError(LookupError):
    pass


class ResultsFeedError(Exception):
    """Fallo al descargar resultados de FastF1."""
