from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./critiquelab.db"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://critiquelab.app,https://staging.critiquelab.app"
    CORS_ORIGINS: str = "*"

    # OpenAI-compatible chat completions gateway
    AI_GATEWAY_URL: str = "https://ai.gateway.lovable.dev/v1/chat/completions"
    AI_GATEWAY_API_KEY: str | None = None
    AI_CRITIQUE_MODEL: str = "google/gemini-2.5-flash"
    AI_SCORING_MODEL: str = "google/gemini-3-flash-preview"
    AI_AUTOPSY_MODEL: str = "google/gemini-3-flash-preview"
    AI_COACH_MODEL: str = "google/gemini-3-flash-preview"
    AI_GATEWAY_TIMEOUT_SECONDS: float = 60.0

    # Fixed-window limit applied per client IP to oracle-backed routes
    RATE_LIMIT_MAX_REQUESTS: int = 10
    RATE_LIMIT_WINDOW_SECONDS: int = 60

    # Score history
    SCORE_RETENTION: int = 100
    CRITIQUE_HISTORY_RETENTION: int = 50
    INPUT_PREVIEW_LENGTH: int = 200

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
