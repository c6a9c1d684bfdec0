# Fichier: wortschatz/backend/app/core/config.py
from pydantic_settings import BaseSettings
from typing import Optional, List
from pydantic import ValidationError, field_validator
import sys


class Settings(BaseSettings):
    DATABASE_URL: str
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
        "http://127.0.0.1:3000",
    ]

    ENVIRONMENT: str = "development"

    # La clé secrète pour signer les JWTs.
    SECRET_KEY: str

    # --- Auth configuration ---
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    PASSWORD_RESET_TTL_MIN: int = 60
    PASSWORD_MIN_LENGTH: int = 6

    # Administrateur créé au démarrage (optionnel)
    DEFAULT_ADMIN_EMAIL: Optional[str] = None
    DEFAULT_ADMIN_PASSWORD: Optional[str] = None

    # --- Gamification ---
    XP_PER_KNOWN_REVIEW: int = 10
    # Chaque révision "known" incrémente words_learned, même pour un mot déjà connu.
    COUNT_REPEAT_KNOWN_REVIEWS: bool = True
    PROGRESS_UPDATE_MAX_RETRIES: int = 3

    # --- Import en masse ---
    BULK_IMPORT_STRICT_TEXT: bool = False
    BULK_IMPORT_STRICT_CSV: bool = False

    # Performance instrumentation
    SQLALCHEMY_SLOW_QUERY_THRESHOLD_MS: int = 300

    class Config:
        env_file = ".env"

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def _normalize_database_url(cls, value: str) -> str:
        """Ensure Postgres URLs always use the asyncpg driver.

        Managed Postgres providers (Supabase included) still expose database
        URLs using the legacy ``postgres://`` scheme, which SQLAlchemy no
        longer understands. Those URLs, as well as ``postgresql://`` and
        psycopg variants, are upgraded to ``postgresql+asyncpg://`` so the
        async engine boots correctly. SQLite and other backends are left
        untouched.
        """

        if not isinstance(value, str):
            return value

        if "+asyncpg" in value:
            return value

        replacements = {
            "postgres://": "postgresql+asyncpg://",
            "postgresql://": "postgresql+asyncpg://",
            "postgresql+psycopg2://": "postgresql+asyncpg://",
            "postgresql+psycopg://": "postgresql+asyncpg://",
        }

        for prefix, target in replacements.items():
            if value.startswith(prefix):
                return target + value[len(prefix) :]

        return value

    @field_validator("PASSWORD_MIN_LENGTH", "ACCESS_TOKEN_EXPIRE_DAYS", "PROGRESS_UPDATE_MAX_RETRIES")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be >= 1")
        return value


def _log_settings_validation_error(exc: ValidationError) -> None:
    """Pretty-print missing or invalid environment variables.

    Pydantic raises during module import, which makes the faulty variable hard
    to spot in deployment logs, so the structured payload is printed before
    the exception is re-raised.
    """

    header = "Configuration error while loading environment variables:"
    print(header, file=sys.stderr)

    details = exc.errors()
    if details:
        for error in details:
            location = ".".join(str(part) for part in error.get("loc", ()))
            message = error.get("msg", "Unknown validation error")
            type_name = error.get("type")
            hint_parts = [message]
            if type_name:
                hint_parts.append(f"(type={type_name})")
            hint = " ".join(hint_parts)
            print(f"  - {location}: {hint}", file=sys.stderr)
    else:
        print(exc, file=sys.stderr)


try:
    settings = Settings()
except ValidationError as exc:  # pragma: no cover - exercised at runtime
    _log_settings_validation_error(exc)
    raise
