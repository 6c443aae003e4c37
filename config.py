"""Application configuration.

Values come from the environment, with a local ``.env`` file loaded first so
API keys stay out of version control.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_DB_PATH = Path(__file__).parent / "data" / "lingosphere.db"


class AppConfig(BaseModel):
    """Runtime settings shared by the client and the engine."""

    gemini_api_key: str | None = None
    model: str = DEFAULT_MODEL
    db_path: Path = DEFAULT_DB_PATH
    reply_delay_seconds: float = Field(default=0.5, ge=0)
    log_level: str = "WARNING"


def load_config(env_file: str | Path | None = None) -> AppConfig:
    """Build the configuration from environment variables.

    Args:
        env_file: Optional path to a dotenv file. Defaults to ``.env``
            discovered from the working directory.

    Returns:
        The populated AppConfig.
    """
    load_dotenv(env_file)

    values: dict = {}
    api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
    if api_key:
        values["gemini_api_key"] = api_key
    if model := os.getenv("LINGOSPHERE_MODEL"):
        values["model"] = model
    if db_path := os.getenv("LINGOSPHERE_DB_PATH"):
        values["db_path"] = Path(db_path)
    if delay := os.getenv("LINGOSPHERE_REPLY_DELAY"):
        values["reply_delay_seconds"] = float(delay)
    if level := os.getenv("LINGOSPHERE_LOG_LEVEL"):
        values["log_level"] = level.upper()
    return AppConfig(**values)
