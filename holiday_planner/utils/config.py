import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# load .env located at the project root (relative, robust across machines)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DOTENV_PATH = os.path.join(BASE_DIR, ".env")
load_dotenv(dotenv_path=DOTENV_PATH)

_TRUTHY = ('1', 'true', 'yes')

# Gemini (GOOGLE_API_KEY kept for older .env files)
GEMINI_API_KEY = os.getenv('GEMINI_API_KEY') or os.getenv('GOOGLE_API_KEY')
GEMINI_MODEL = os.getenv('GEMINI_MODEL', 'gemini-2.5-flash')

# Sampling for the recommendation call
COMPLETION_TEMPERATURE = 0.7
COMPLETION_MAX_OUTPUT_TOKENS = 1024

ENV = os.getenv('ENV', 'development').lower()

# Return fallback-extracted JSON without re-validating each destination
RECOMMENDATION_LENIENT_FALLBACK = os.getenv('RECOMMENDATION_LENIENT_FALLBACK', 'false').lower() in _TRUTHY

# CORS
CORS_ORIGINS = os.getenv(
    'CORS_ORIGINS',
    "http://localhost:8501,http://localhost:3000,http://127.0.0.1:8501,http://127.0.0.1:3000",
)

# Streamlit client
PLANNER_API_URL = os.getenv('PLANNER_API_URL', 'http://localhost:8000')
# Seconds the client waits for the endpoint; unset means no limit
_PLANNER_API_TIMEOUT = os.getenv('PLANNER_API_TIMEOUT')
PLANNER_API_TIMEOUT = float(_PLANNER_API_TIMEOUT) if _PLANNER_API_TIMEOUT else None


class Settings(BaseModel):
    """Runtime configuration handed to the recommendation endpoint."""

    gemini_api_key: Optional[str] = None
    gemini_model: str = GEMINI_MODEL
    temperature: float = COMPLETION_TEMPERATURE
    max_output_tokens: int = COMPLETION_MAX_OUTPUT_TOKENS
    env: str = 'development'
    lenient_fallback: bool = False
    cors_origins: List[str] = Field(default_factory=list)

    @property
    def is_production(self) -> bool:
        return self.env == 'production'

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            gemini_api_key=GEMINI_API_KEY,
            gemini_model=GEMINI_MODEL,
            env=ENV,
            lenient_fallback=RECOMMENDATION_LENIENT_FALLBACK,
            cors_origins=[o.strip() for o in CORS_ORIGINS.split(",") if o.strip()],
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
