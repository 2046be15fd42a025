"""
Application-specific settings.
"""
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Defines application-wide settings like project name, environment and the
    public base URL used to build confirmation links.
    """
    PROJECT_NAME: str = "newsletter-api"
    VERSION: str = "0.1.0"
    APP_ENV: str = Field(
        default="development",
        pattern="^(development|test|staging|production)$",
    )
    DEBUG: bool = False

    API_HOST: str = "0.0.0.0"
    API_PORT: int = Field(ge=1, le=65535, default=8000)

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    APP_BASE_URL: str = Field(
        default="http://127.0.0.1:8000",
        description="Public base URL of the service, used in confirmation links",
    )

    @field_validator("APP_BASE_URL", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """
        Removes trailing slashes so that links can be built by plain concatenation.

        Args:
            v: Configured base URL.

        Returns:
            The base URL without a trailing slash.
        """
        if isinstance(v, str):
            return v.rstrip("/")
        return v
