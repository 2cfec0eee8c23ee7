# Standard library imports
from typing import Annotated, Any, Literal

# Third-party imports
from pydantic import AnyUrl, BeforeValidator, computed_field
from pydantic_core import MultiHostUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class CommonSettings(BaseSettings):
    model_config = SettingsConfigDict(
        # Use top level .env file (one level above ./back/)
        env_file="../.env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # General settings
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["dev", "staging", "production"] = "dev"
    DEBUG_MODE: bool = False
    PROJECT_NAME: str = "Samadhan"

    # Database settings
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "samadhan"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "samadhan"
    # Any async SQLAlchemy URL; takes precedence over the POSTGRES_* settings
    DATABASE_URL: str | None = None
    SQL_ECHO: bool = False

    @property
    def SQLALCHEMY_ASYNC_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return str(
            MultiHostUrl.build(
                scheme="postgresql+asyncpg",  # async driver for async queries
                username=self.POSTGRES_USER,
                password=self.POSTGRES_PASSWORD,
                host=self.POSTGRES_SERVER,
                port=self.POSTGRES_PORT,
                path=self.POSTGRES_DB,
            )
        )

    # CORS settings
    BACKEND_CORS_ORIGINS: Annotated[list[AnyUrl] | str, BeforeValidator(parse_cors)] = [
        AnyUrl("http://localhost/"),
        AnyUrl("http://localhost:3000/"),
        AnyUrl("http://localhost:8000/"),
    ]

    @computed_field  # type: ignore[prop-decorator, misc]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS]

    # Optional settings
    SENTRY_DSN: str | None = None

    # JWT settings (tokens are issued by the identity provider)
    JWT_ALGORITHM: str = "HS256"
    JWT_SECRET_KEY: str

    # Redis settings
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_ENABLED: bool = True
    ANALYTICS_CACHE_SECONDS: int = 300  # 5 minutes

    # Admin settings
    ADMIN_EMAIL: str = "admin@civic.gov"
    ADMIN_NAME: str = "Admin User"

    # Celery settings
    CELERY_BROKER_URL: str = "redis://redis:6379/2"
    CELERY_RESULT_BACKEND: str = "redis://redis:6379/3"
    CELERY_WORKER_CONCURRENCY: int = 4
    USER_COUNTERS_REFRESH_MINUTES: int = 30

    # AI settings
    AI_CONFIDENCE_THRESHOLD: float = 0.7  # 70% confidence for auto-categorization
    AI_CATEGORY_POLICY: Literal["override", "fill-other"] = "override"
    AI_CATEGORIZATION_URL: str | None = None
    AI_CATEGORIZATION_API_KEY: str | None = None
    AI_CATEGORIZATION_TIMEOUT: float = 10.0

    # Complaint settings
    MAX_IMAGES_PER_COMPLAINT: int = 5
    NEARBY_RADIUS_KM: float = 5.0
    TRENDING_GRAVITY: float = 1.5
    TRENDING_WINDOW_DAYS: int = 30

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100
