import os
from typing import Optional
from langchain_openai import ChatOpenAI
from pydantic import SecretStr
from app.core.config import settings


class LLMFactory:
    """Factory for creating configured chat models with optional tracing."""

    @staticmethod
    def create_llm(
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        tracing_project: Optional[str] = None,
        api_key: Optional[str] = None
    ) -> ChatOpenAI:
        """
        Create a configured ChatOpenAI instance.

        Args:
            model: Model name (defaults to ADVICE_MODEL).
            temperature: Sampling temperature.
            max_tokens: Upper bound on generated tokens.
            tracing_project: The LangSmith project name for tracing.
            api_key: OpenAI API key (defaults to settings).
        """
        if settings.LANGSMITH_TRACING:
            os.environ["LANGCHAIN_TRACING_V2"] = "true"
            os.environ["LANGCHAIN_ENDPOINT"] = settings.LANGSMITH_ENDPOINT
            os.environ["LANGCHAIN_API_KEY"] = settings.LANGSMITH_API_KEY
            os.environ["LANGCHAIN_PROJECT"] = tracing_project or settings.LANGSMITH_PROJECT

        return ChatOpenAI(
            model=model or settings.ADVICE_MODEL,
            api_key=SecretStr(api_key or settings.OPENAI_API_KEY),
            temperature=temperature,
            max_tokens=max_tokens,
        )
