from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    host: str = "127.0.0.1"
    port: int = 9000
    token_file: Path = Path("tokens.json")
    client_secret_file: Path = Path("client_secret.json")
    log_level: str = "INFO"
    default_tasklist: str = "@default"
    resource_page_size: int = 10

    model_config = {"env_prefix": "GTASKS_", "env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
