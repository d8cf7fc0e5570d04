"""
Configuration management using Pydantic settings.
"""
from typing import List, Union
import os
from pydantic import AnyHttpUrl, field_validator
from pydantic_settings import BaseSettings
from dotenv import load_dotenv
load_dotenv()



class Settings(BaseSettings):
    """Application settings."""

    # API Configuration
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Takken Study Engine"
    ENV: str = os.getenv("ENV", "development")
    DEBUG: bool = os.getenv("DEBUG", "true").lower() == "true"

    # Database Configuration
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./study_engine.db")

    # JWT Configuration (tokens are issued by the external identity service)
    SECRET_KEY: str = os.getenv("SECRET_KEY", "")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Study statistics
    STUDY_TIMEZONE: str = os.getenv("STUDY_TIMEZONE", "Asia/Tokyo")
    RECENT_ANSWERS_LIMIT: int = int(os.getenv("RECENT_ANSWERS_LIMIT", 10))

    # Mock exam (modeled on the real exam: 50 questions, 2 hours, pass at 35)
    MOCK_EXAM_QUESTION_COUNT: int = int(os.getenv("MOCK_EXAM_QUESTION_COUNT", 50))
    MOCK_EXAM_TIME_LIMIT_SECONDS: int = int(os.getenv("MOCK_EXAM_TIME_LIMIT_SECONDS", 120 * 60))
    MOCK_EXAM_PASS_CUTOFF: int = int(os.getenv("MOCK_EXAM_PASS_CUTOFF", 35))
    ASSESSMENT_TICK_SECONDS: int = int(os.getenv("ASSESSMENT_TICK_SECONDS", 1))
    RESULT_HISTORY_LIMIT: int = int(os.getenv("RESULT_HISTORY_LIMIT", 20))
    FINISHED_SESSION_RETENTION_SECONDS: int = int(os.getenv("FINISHED_SESSION_RETENTION_SECONDS", 300))

    # Review sessions
    REVIEW_MAX_EVENTS: int = int(os.getenv("REVIEW_MAX_EVENTS", 50))
    REVIEW_SESSION_TIME_LIMIT_SECONDS: int = int(os.getenv("REVIEW_SESSION_TIME_LIMIT_SECONDS", 30 * 60))

    # LLMs Configuration
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    ADVICE_MODEL: str = os.getenv("ADVICE_MODEL", "gpt-4.1-mini")

    # LangSmith Tracing Configuration
    LANGSMITH_TRACING: bool = os.getenv("LANGSMITH_TRACING", "false").lower() == "true"
    LANGSMITH_ENDPOINT: str = os.getenv("LANGSMITH_ENDPOINT", "")
    LANGSMITH_API_KEY: str = os.getenv("LANGSMITH_API_KEY", "")
    LANGSMITH_PROJECT: str = os.getenv("LANGSMITH_PROJECT", "")

    # CORS Configuration
    BACKEND_CORS_ORIGINS: Union[List[AnyHttpUrl], str] = "*"

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if v == "*" or v == ["*"]:
            return "*"
        if isinstance(v, str):
            return [i.strip() for i in v.split(",")]
        return v

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
