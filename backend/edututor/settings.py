from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
	# Provider can be "vertex" (Vertex AI Express) or "ai_studio" (Generative Language API)
	gemini_provider: str = Field(default="ai_studio", validation_alias="GEMINI_PROVIDER")
	gemini_model: str = Field(default="gemini-2.5-flash", validation_alias="GEMINI_MODEL")
	# Vertex configuration
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")

	# Sampling parameters sent as generationConfig
	gemini_temperature: float = Field(default=0.7, validation_alias="GEMINI_TEMPERATURE")
	gemini_top_k: int = Field(default=40, validation_alias="GEMINI_TOP_K")
	gemini_top_p: float = Field(default=0.95, validation_alias="GEMINI_TOP_P")
	gemini_max_output_tokens: int = Field(default=1024, validation_alias="GEMINI_MAX_OUTPUT_TOKENS")

	# OpenRouter secondary provider (optional)
	openrouter_api_key: str | None = Field(default=None, validation_alias="OPENROUTER_API_KEY")
	openrouter_model: str = Field(default="x-ai/grok-4-fast:free", validation_alias="OPENROUTER_MODEL")
	openrouter_base_url: str = Field(default="https://openrouter.ai/api/v1/chat/completions", validation_alias="OPENROUTER_BASE_URL")
	openrouter_referer: str = Field(default="https://localhost", validation_alias="OPENROUTER_HTTP_REFERER")
	openrouter_title: str = Field(default="EduTutor", validation_alias="OPENROUTER_TITLE")

	# Orchestration budget (one per process)
	model_timeout_seconds: float = Field(default=30.0, validation_alias="MODEL_TIMEOUT_SECONDS")
	# Bound on record-store writes; a slow store never holds up a result
	persist_timeout_seconds: float = Field(default=5.0, validation_alias="PERSIST_TIMEOUT_SECONDS")
	rate_limit_max_requests: int = Field(default=10, validation_alias="RATE_LIMIT_MAX_REQUESTS")
	rate_limit_window_seconds: float = Field(default=60.0, validation_alias="RATE_LIMIT_WINDOW_SECONDS")
	cache_timeout_seconds: float = Field(default=300.0, validation_alias="CACHE_TIMEOUT_SECONDS")
	# Unset keeps the cache unbounded; long-lived servers should cap it
	cache_max_entries: int | None = Field(default=None, validation_alias="CACHE_MAX_ENTRIES")

	# Identity tokens issued by the auth provider
	jwt_secret_key: str = Field(default="change-me", validation_alias="JWT_SECRET_KEY")
	jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
	access_token_expire_minutes: int = Field(default=120, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")

	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
