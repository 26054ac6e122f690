"""Configuration loading via Pydantic settings."""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel


class SearchConfig(BaseModel):
    enabled: bool = True
    url: str = "http://localhost:9200"
    username: str = "elastic"
    password: str = ""
    request_timeout: float = 10.0
    jobs_index: str = "jobs"
    applications_index: str = "applications"
    reindex_on_startup: bool = True

    @property
    def effective_password(self) -> str:
        return os.getenv("JOBBOARD_SEARCH_PASSWORD", "") or self.password


class WebConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000
    reload: bool = False


class HealthCheckConfig(BaseModel):
    enabled: bool = False
    cron: str = "*/5 * * * *"  # Every 5 minutes


class LoggingConfig(BaseModel):
    level: str = "INFO"


class JobBoardConfig(BaseModel):
    search: SearchConfig = SearchConfig()
    web: WebConfig = WebConfig()
    health_check: HealthCheckConfig = HealthCheckConfig()
    logging: LoggingConfig = LoggingConfig()
    db_path: str = "jobboard.db"


def load_config(config_path: Path | None = None) -> JobBoardConfig:
    """Load configuration from YAML file."""
    if config_path is None:
        config_path = Path("config.yaml")

    if config_path.exists():
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        return JobBoardConfig(**data)

    return JobBoardConfig()
