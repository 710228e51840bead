from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TeamConfig(BaseModel):
    """One configured team, as read from the TEAMS setting."""

    name: str
    color: str = Field(..., description="CSS color used for badges and backgrounds.")
    emoji: Optional[str] = None


DEFAULT_TEAMS = [
    TeamConfig(name="Red", color="#FF5252", emoji="🔴"),
    TeamConfig(name="Blue", color="#2196F3", emoji="🔵"),
    TeamConfig(name="Green", color="#4CAF50", emoji="🟢"),
    TeamConfig(name="Yellow", color="#FFEB3B", emoji="🟡"),
]


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./teams.db"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Teams, e.g. TEAMS='[{"name": "Red", "color": "#FF5252", "emoji": "🔴"}]'
    TEAMS: List[TeamConfig] = Field(default_factory=lambda: list(DEFAULT_TEAMS))

    # QR code
    ASSIGNMENT_PATH: str = "/team"
    PUBLIC_BASE_URL: Optional[str] = None
    QR_WIDTH: int = 400
    QR_MARGIN: int = 2
    QR_DARK_COLOR: str = "#000000"
    QR_LIGHT_COLOR: str = "#FFFFFF"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def normalize_postgres_scheme(cls, value: str) -> str:
        # Hosted Postgres often hands out postgres://, SQLAlchemy expects postgresql://
        if value.startswith("postgres://"):
            return value.replace("postgres://", "postgresql://", 1)
        return value

    @field_validator("TEAMS")
    @classmethod
    def validate_teams(cls, teams: List[TeamConfig]) -> List[TeamConfig]:
        if not teams:
            raise ValueError("At least one team must be configured.")
        names = [team.name for team in teams]
        if len(set(names)) != len(names):
            raise ValueError(f"Team names must be unique. Got: {names}")
        return teams


config_settings = Settings()
