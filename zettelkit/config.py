from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ZETTELKIT_")

    # Discovery settings
    notes_dir: Path = Path("notes")
    recurse_dir: bool = False

    # Cache settings
    cache_path: Path = Path(".zettelkit/cache.json")
    min_version: str = "0.1.0"

    # Parsing settings
    workers: int = 1  # > 1 parses notes on a thread pool
    context_chars: int = 100  # characters kept on each side of a link

    log_level: str = "INFO"  # Can be DEBUG, INFO, WARNING, ERROR, CRITICAL


settings = Settings()
