"""
CodeMentor - Configuration
Settings read from environment variables (optionally from a .env file).
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
_ENV_PATH = BASE_DIR / ".env"
if _ENV_PATH.is_file():
    load_dotenv(_ENV_PATH)


PROVIDER_GEMINI = "gemini"
PROVIDER_GROQ = "groq"

DEFAULT_MODELS = {
    PROVIDER_GEMINI: "gemini-2.5-flash",
    PROVIDER_GROQ: "llama-3.3-70b-versatile",
}

DEFAULT_STORAGE_PATH = Path.home() / ".codementor" / "preferences.json"


def _get(key: str, default: str = "") -> str:
    return (os.getenv(key) or default).strip()


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the backend client, storage and logging."""
    provider: str = PROVIDER_GEMINI
    gemini_api_key: str = ""
    groq_api_key: str = ""
    model: str = DEFAULT_MODELS[PROVIDER_GEMINI]
    response_language: str = "English"
    storage_path: Path = DEFAULT_STORAGE_PATH
    log_level: str = "INFO"

    @property
    def api_key(self) -> str:
        """Credential for the selected provider."""
        if self.provider == PROVIDER_GROQ:
            return self.groq_api_key
        return self.gemini_api_key

    @classmethod
    def from_env(cls) -> "Settings":
        provider = _get("CODEMENTOR_PROVIDER", PROVIDER_GEMINI).lower()
        if provider not in DEFAULT_MODELS:
            raise ValueError(
                f"Unknown provider '{provider}', expected one of: {', '.join(DEFAULT_MODELS)}"
            )
        storage_path = _get("CODEMENTOR_STORAGE_PATH")
        return cls(
            provider=provider,
            gemini_api_key=_get("GEMINI_API_KEY") or _get("GOOGLE_AI_API_KEY") or _get("API_KEY"),
            groq_api_key=_get("GROQ_API_KEY"),
            model=_get("CODEMENTOR_MODEL") or DEFAULT_MODELS[provider],
            response_language=_get("CODEMENTOR_RESPONSE_LANGUAGE", "English"),
            storage_path=Path(storage_path).expanduser() if storage_path else DEFAULT_STORAGE_PATH,
            log_level=_get("CODEMENTOR_LOG_LEVEL", "INFO").upper(),
        )
