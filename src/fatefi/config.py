"""Configuration loader for the FateFi API."""
import os
from dataclasses import dataclass

from dotenv import load_dotenv


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_csv(value: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
    if not value:
        return default
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _get_float(value: str | None, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_int(value: str | None, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    database_url: str
    sql_echo: bool
    mirror_database_url: str
    mirror_timeout_s: float
    market_timezone: str
    price_asset: str
    coingecko_api_key: str
    price_timeout_s: float
    price_interval_s: float
    check_interval_s: float
    resolve_window: tuple[int, int]
    create_window: tuple[int, int]
    volatility_threshold: float
    points_correct: int
    streak_bonus: int
    oracle_url: str
    oracle_token: str
    oracle_model: str
    oracle_timeout_s: float
    jwt_secret: str
    jwt_expire_days: int
    cors_origins: tuple[str, ...]
    scheduler_enabled: bool
    log_level: str

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            database_url=os.getenv("DATABASE_URL", "sqlite:///fatefi.db"),
            sql_echo=_get_bool(os.getenv("SQL_ECHO")),
            mirror_database_url=os.getenv("MIRROR_DATABASE_URL", ""),
            mirror_timeout_s=_get_float(os.getenv("MIRROR_TIMEOUT_S"), 10.0),
            market_timezone=os.getenv("MARKET_TIMEZONE", "Asia/Kolkata"),
            price_asset=os.getenv("PRICE_ASSET", "ethereum"),
            coingecko_api_key=os.getenv("COINGECKO_API_KEY", ""),
            price_timeout_s=_get_float(os.getenv("PRICE_TIMEOUT_S"), 8.0),
            price_interval_s=_get_float(os.getenv("PRICE_INTERVAL_S"), 300.0),
            check_interval_s=_get_float(os.getenv("CHECK_INTERVAL_S"), 60.0),
            resolve_window=(
                _get_int(os.getenv("RESOLVE_WINDOW_START"), 1),
                _get_int(os.getenv("RESOLVE_WINDOW_END"), 4),
            ),
            create_window=(
                _get_int(os.getenv("CREATE_WINDOW_START"), 5),
                _get_int(os.getenv("CREATE_WINDOW_END"), 8),
            ),
            volatility_threshold=_get_float(os.getenv("VOLATILITY_THRESHOLD"), 0.03),
            points_correct=_get_int(os.getenv("POINTS_CORRECT"), 10),
            streak_bonus=_get_int(os.getenv("STREAK_BONUS"), 2),
            oracle_url=os.getenv("ORACLE_URL", "http://127.0.0.1:18789"),
            oracle_token=os.getenv("ORACLE_TOKEN", ""),
            oracle_model=os.getenv("ORACLE_MODEL", "default"),
            oracle_timeout_s=_get_float(os.getenv("ORACLE_TIMEOUT_S"), 15.0),
            jwt_secret=os.getenv("JWT_SECRET", "fatefi-dev-secret"),
            jwt_expire_days=_get_int(os.getenv("JWT_EXPIRE_DAYS"), 7),
            cors_origins=_get_csv(
                os.getenv("CORS_ORIGINS"),
                default=("http://localhost:3000", "http://localhost:3001"),
            ),
            scheduler_enabled=_get_bool(os.getenv("SCHEDULER_ENABLED"), default=True),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


settings = Settings.from_env()
