from pathlib import Path
from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings

import os
from typing import Optional

# Load .env for local/dev environments only for values missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {
        k: v for k, v in file_env.items() if k not in os.environ and v is not None
    }
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Ambient settings pulled from CASTLERUN_* environment variables."""

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (console or json)")

    # Map Generation Defaults
    default_width: int = Field(default=50, description="Default grid width")
    default_height: int = Field(default=50, description="Default grid height")
    default_target_percentage: float = Field(default=30.0, description="Default floor percentage")
    default_break_wall_weight: int = Field(default=5, description="Default wall-break weight")
    default_backtrack_weight: int = Field(default=1, description="Default backtrack weight")
    default_seed: Optional[int] = Field(default=None, description="Default seed, wall clock when unset")

    class Config:
        env_prefix = "CASTLERUN_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Instantiate singleton settings object
settings = Settings()
