# frontdesk/config.py
import os
from pydantic_settings import BaseSettings
from pydantic import Field, AliasChoices
from pydantic_settings import SettingsConfigDict
from typing import List
from functools import lru_cache

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra='ignore')

    # Application Settings
    APP_NAME: str = "Clinic Front Desk API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DOCS_ENABLED: bool = True

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = int(os.environ.get("PORT", 8000))

    # Database Settings
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "sqlite:///./frontdesk.db")

    # Session credential verification
    SESSION_JWT_SECRET: str = Field(
        default="",
        validation_alias=AliasChoices("SESSION_JWT_SECRET", "SUPABASE_JWT_SECRET"),
    )
    ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str = "authenticated"

    # Identity provider (Supabase GoTrue admin API)
    SUPABASE_URL: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
    )
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    SITE_URL: str = Field(
        default="http://localhost:3000",
        validation_alias=AliasChoices("SITE_URL", "NEXT_PUBLIC_SITE_URL"),
    )
    IDENTITY_PROVIDER_TIMEOUT: float = 10.0

    # Domain limits
    PRESENCE_ONLINE_WINDOW_SECONDS: int = 120
    PATIENT_PAGE_SIZE: int = 100
    APPOINTMENT_QUERY_CAP: int = 1000

    # CORS Settings
    ALLOWED_ORIGINS: str = os.environ.get("ALLOWED_ORIGINS", "*")

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def _split_csv(self, value: str) -> List[str]:
        if value is None:
            return []
        value = value.strip()
        if value == "":
            return []
        return [item.strip() for item in value.split(",")]

    @property
    def allowed_origins_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_ORIGINS)

    @property
    def invite_redirect_url(self) -> str:
        return f"{self.SITE_URL.rstrip('/')}/auth/callback"

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings: Settings = get_settings()
