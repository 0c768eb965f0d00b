"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # PostgreSQL
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "placement_user"
    postgres_password: str = "password"
    postgres_db: str = "placement_prep"

    # MongoDB (resume text + resume files in GridFS)
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "placement_prep_docs"
    mongodb_timeout_ms: int = 5000

    # LLM gateway (OpenAI-compatible endpoint, Gemini by default)
    llm_api_key: str = ""
    llm_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    llm_model: str = "gemini-1.5-flash"

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Mock interview quotas
    interview_general_questions: int = 5
    interview_specialized_questions: int = 4
    interview_max_sessions_per_day: int = 3
    interview_min_answer_length: int = 20

    # Resume upload
    resume_max_size_mb: int = 5

    # App
    debug: bool = False
    log_level: str = "INFO"
    public_base_url: str = "http://localhost:8000"

    @property
    def postgres_url(self) -> str:
        """Construct PostgreSQL connection URL"""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def interview_total_questions(self) -> int:
        return self.interview_general_questions + self.interview_specialized_questions

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
