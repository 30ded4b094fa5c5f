import logging

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


class Settings(BaseSettings):
    # Hosted backend
    backend_url: str = "http://localhost:8000/api"
    project_id: str = ""
    public_key: str = ""
    request_timeout: float = 10.0
    page_size: int = 1000

    # Notifications: alerts fire on every load unless this is switched on
    dedupe_budget_alerts: bool = False

    log_level: str = "INFO"
    currency_symbol: str = "$"

    model_config = SettingsConfigDict(
        env_prefix="FINTRACK_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


def get_settings(**overrides) -> Settings:
    return Settings(**overrides)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
