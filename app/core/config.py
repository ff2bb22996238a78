from pydantic.types import SecretStr
from functools import lru_cache
from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_comma_separated_origins(comma_list: str) -> list[HttpUrl]:
    """
    Parse a comma-separated string into a list of validated HttpUrl origins.

    Parameters:
        comma_list (str): Comma-separated origins (may be empty or falsy).

    Returns:
        list[HttpUrl]: Parsed origins; empty input yields an empty list.

    Raises:
        ValueError: If any origin cannot be parsed as an HttpUrl.
    """
    if not comma_list:
        return []
    origins = []
    for origin in comma_list.split(","):
        origin = origin.strip()
        if origin:
            try:
                origins.append(HttpUrl(origin))
            except Exception as e:
                raise ValueError(f"Invalid CORS origin '{origin}': {e}") from e
    return origins


class Settings(BaseSettings):
    DATABASE_URL: str
    SECRET_KEY: SecretStr
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    BACKEND_CORS_ORIGINS: str = ""
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    # Deadline monitor: bounded so a misconfiguration cannot hammer the database
    DEADLINE_MONITOR_INTERVAL_SECONDS: int = Field(default=60, ge=60, le=900)
    DEADLINE_WARNING_DAYS: int = Field(default=3, ge=1)

    # Values come from the process environment, then from the .env file
    # that is kept out of the repository
    model_config = SettingsConfigDict(
        env_file_encoding="utf-8", env_file=".env", extra="ignore"
    )


@lru_cache()
# get_settings.cache_clear() is needed by tests that change env vars
def get_settings() -> Settings:
    """
    Load application settings from environment variables and the .env file.

    Returns:
        Settings: The cached settings instance.
    """
    return Settings()
