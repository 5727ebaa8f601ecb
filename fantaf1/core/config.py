from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    env: str = "development"
    database_url: str = "sqlite:///./fantaf1.db"

    # JWT
    secret_key: str = "cambia-esta-clave"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7

    log_level: str = "INFO"
    log_dir: str | None = None
    fastf1_cache_dir: str = "cache"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Tabla de puntos (LEGACY_TOP3)
    legacy_first_points: int = 25
    legacy_second_points: int = 15
    legacy_third_points: int = 10
    legacy_wrong_position_points: int = 5

    # Peso por tipo de evento (SPRINT = mitad)
    race_weight: float = 1.0
    sprint_weight: float = 0.5

    # FULL_GRID_DIFF
    missing_driver_penalty: int = 20
    worst_score: int = 1000

    model_config = SettingsConfigDict(env_file=".env", env_prefix="", case_sensitive=False)


settings = Settings()
