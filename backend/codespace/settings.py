from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # --- Storage ---
    APP_STORAGE_ENGINE: str = "memory"   # memory | mongo
    MONGODB_URI: str = "mongodb://mongo:27017"
    MONGODB_DB: str = "codespace"
    SEED_DEFAULT_PROJECT: bool = True

    # --- Web origin (CORS) ---
    WEB_ORIGIN: str = "http://localhost:5173"

    # --- Text generation (OpenAI-compatible chat/completions) ---
    LLM_BASE_URL: str | None = None
    LLM_API_KEY: str | None = None
    LLM_MODEL: str | None = None
    OPENAI_API_KEY: str | None = None
    LLM_TIMEOUT_SEC: int = 120
    COMPLETION_MAX_TOKENS: int = 1024

    # --- Command execution ---
    EXECUTE_DEFAULT_CWD: str = "/tmp"
    EXECUTE_TIMEOUT_SEC: int = 60
    EXECUTE_MAX_OUTPUT_CHARS: int = 200_000
    EXECUTE_REMOTE_URL: str | None = None   # set to send commands to a remote POST /execute service

    # --- Server-held sessions ---
    SESSION_MAX_WORKSPACES: int = 64
    SESSION_MAX_CONSOLES: int = 64

    APP_VERSION: str = "dev"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
