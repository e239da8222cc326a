"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"
    VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./ministering.db"

    # Session cookie (JWT carrying the session id)
    SESSION_SECRET: str = "change-this-in-production"
    SESSION_TTL_HOURS: int = 168

    # Google OpenID Connect login
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    GOOGLE_REDIRECT_URI: str = "http://localhost:8000/api/callback"

    # Frontend (for safe redirects)
    FRONTEND_URL: str = "http://localhost:5173"

    # CORS
    CORS_ORIGINS: str = "http://localhost:5173"

    # OpenAI (Whisper transcription + chat analysis)
    OPENAI_API_KEY: str = ""
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    ANALYSIS_MODEL: str = "gpt-4o"

    # Transcription provider: "openai" or "google"
    TRANSCRIPTION_PROVIDER: str = "google"
    GOOGLE_APPLICATION_CREDENTIALS: str = ""
    GOOGLE_CLOUD_PROJECT: str = ""
    SPEECH_LANGUAGE_CODE: str = "en-US"

    # Uploads
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Rate Limiting (requests per minute)
    RATE_LIMIT_AUTH: int = 5  # Login attempts
    RATE_LIMIT_API: int = 60  # General API
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def cookie_secure(self) -> bool:
        """Secure cookies only in production."""
        return self.ENV != "dev"


settings = Settings()
