from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator

from .schemas import BackoffStrategy

class Settings(BaseSettings):
	# OpenAI-compatible chat completions endpoint
	inference_api_key: str | None = Field(default=None, validation_alias="INFERENCE_API_KEY")
	inference_base_url: str = Field(default="https://api.openai.com/v1/chat/completions", validation_alias="INFERENCE_BASE_URL")
	# Transport-level ceiling in seconds; per-attempt timeouts are set by the gateway
	inference_http_timeout: float = Field(default=30.0, validation_alias="INFERENCE_HTTP_TIMEOUT")

	# Gateway retry policy
	eval_max_retries: int = Field(default=3, ge=1, validation_alias="EVAL_MAX_RETRIES")
	eval_base_delay_ms: int = Field(default=100, ge=0, validation_alias="EVAL_BASE_DELAY_MS")
	eval_backoff_strategy: BackoffStrategy = Field(default=BackoffStrategy.LINEAR, validation_alias="EVAL_BACKOFF_STRATEGY")
	eval_max_delay_ms: int = Field(default=5000, ge=0, validation_alias="EVAL_MAX_DELAY_MS")
	# 200ms target response time
	eval_default_timeout_ms: int = Field(default=200, gt=0, validation_alias="EVAL_DEFAULT_TIMEOUT_MS")

	# Bearer tokens are issued by the auth service; we only verify them
	jwt_secret_key: str = Field(default="change-me", validation_alias="JWT_SECRET_KEY")
	jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	@field_validator("eval_backoff_strategy", mode="before")
	@classmethod
	def _lower_strategy(cls, v):
		return v.lower() if isinstance(v, str) else v

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
