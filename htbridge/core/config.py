from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    NATS_URL: str = Field("nats://localhost:4222", description="Message bus URL")

    ADAPTER_ID: str = Field("hemtjanst", description="Adapter id used in gateway subjects")
    ADAPTER_NAME: str = Field("HemtjänstPlugin", description="Adapter display name")

    SETTLE_DELAY: float = Field(1.0, description="Seconds from first discovery to ready")
    STATUS_INTERVAL: int = Field(30, description="Seconds between status publications")
    DISCOVER_ON_START: bool = True

    GATEWAY_URL: Optional[str] = None

    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"


settings = Settings()
