from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_FILE = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "SecUrAuditz"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite+aiosqlite:///./securauditz.db"

    CORS_ORIGINS: str = "http://localhost:3001"

    # Evidence uploads and framework reference documents (served as static files)
    UPLOAD_DIR: str = "uploads"
    FRAMEWORK_DOCS_DIR: str = "framework_docs"

    # Generative AI: gemini | anthropic | openai_compatible | none
    AI_PROVIDER: str = "gemini"
    AI_API_KEY: str = ""
    AI_ENDPOINT: str = ""
    AI_MODEL: str = "gemini-2.0-flash"
    AI_MAX_TOKENS: int = 1024
    AI_TEMPERATURE: float = 0.4
    AI_TIMEOUT: int = 60

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]


settings = Settings()
