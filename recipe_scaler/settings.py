from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Recipe Scaler API"
    log_level: str = "INFO"

    # Per-IP limit applied to every route
    rate_limit: str = "100/minute"

    # Accepted multiplier window at the HTTP boundary (inclusive)
    multiplier_min: float = 0.1
    multiplier_max: float = 10.0

    # Scaling policy
    snap_tolerance: float = 0.02
    pinch_floor_ml: float = 0.31  # ~1/16 tsp
    pinch_floor_g: float = 0.36   # a pinch of table salt
    unit_upgrades_enabled: bool = True

    # Thread pool size for batch ingredient parsing. 1 parses inline.
    parse_max_workers: int = 4

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]


settings = Settings()
