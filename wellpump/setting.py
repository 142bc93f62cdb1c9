"""Runtime settings for WellPump.

Values come from environment variables (a local ``.env`` is loaded first).
Call ``get_settings()`` to obtain the cached instance.
"""

import logging
import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).strip().lower() in ("1", "true", "yes", "on")


class DatabaseSettings(BaseModel):
    url: str = "sqlite:///pump_data.db"
    echo: bool = False


class LLMSettings(BaseModel):
    api_key: Optional[str] = None
    model: str = "gpt-4o"
    max_tokens: int = 500
    temperature: float = 0.0


class SelectionSettings(BaseModel):
    # Base URL used to resolve relative chart image references for the LLM
    image_base_url: Optional[str] = None
    seed_path: str = "data/floWise.json"


class WellPumpSettings(BaseModel):
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    selection: SelectionSettings = Field(default_factory=SelectionSettings)
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    @classmethod
    def from_env(cls) -> "WellPumpSettings":
        """Build settings from the current process environment."""
        origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")
        return cls(
            database=DatabaseSettings(
                url=os.getenv("DATABASE_URL", DatabaseSettings().url),
                echo=_env_bool("SQL_ECHO"),
            ),
            llm=LLMSettings(
                api_key=os.getenv("OPENAI_API_KEY") or None,
                model=os.getenv("LLM_MODEL", "gpt-4o"),
                max_tokens=int(os.getenv("LLM_MAX_TOKENS", "500")),
                temperature=float(os.getenv("LLM_TEMPERATURE", "0.0")),
            ),
            selection=SelectionSettings(
                image_base_url=os.getenv("IMAGE_BASE_URL") or None,
                seed_path=os.getenv("PUMP_SEED_PATH", "data/floWise.json"),
            ),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        )


@lru_cache(maxsize=1)
def get_settings() -> WellPumpSettings:
    settings = WellPumpSettings.from_env()
    logger.debug(
        f"Settings loaded: database={settings.database.url} "
        f"llm_model={settings.llm.model} llm_key_set={settings.llm.api_key is not None}"
    )
    return settings
