import logging
import os

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class AppConfig:
    DATABASE_URL: str = os.getenv("CHAT_MEMORY__DATABASE_URL", "sqlite:///./data/chat_memory.db")

    # OpenAI-совместимый endpoint (по умолчанию OpenRouter)
    LLM_BASE_URL: str = os.getenv("CHAT_MEMORY__LLM_BASE_URL", "https://openrouter.ai/api/v1")
    LLM_API_KEY: str = os.getenv("CHAT_MEMORY__LLM_API_KEY", "")
    LLM_TIMEOUT: float = float(os.getenv("CHAT_MEMORY__LLM_TIMEOUT", "60.0"))
    HTTP_REFERER: str = os.getenv("CHAT_MEMORY__HTTP_REFERER", "http://localhost:8080")
    APP_TITLE: str = os.getenv("CHAT_MEMORY__APP_TITLE", "AI Demo")

    # Модели для сравнения (alias -> id модели)
    MODEL_DEEPSEEK: str = os.getenv("CHAT_MEMORY__MODEL_DEEPSEEK", "deepseek/deepseek-chat-v3.1:free")
    MODEL_GROK: str = os.getenv("CHAT_MEMORY__MODEL_GROK", "x-ai/grok-4-fast:free")
    MODEL_GEMMA: str = os.getenv("CHAT_MEMORY__MODEL_GEMMA", "google/gemma-3-27b-it:free")

    SUMMARIZATION_MODEL: str = os.getenv("CHAT_MEMORY__SUMMARIZATION_MODEL", "deepseek/deepseek-chat-v3.1:free")
    SUMMARY_INCLUDE_PREVIOUS: bool = _as_bool(os.getenv("CHAT_MEMORY__SUMMARY_INCLUDE_PREVIOUS", "false"))

    LOG_LEVEL: str = os.getenv("CHAT_MEMORY__LOG_LEVEL", "INFO")
    VERSION: str = os.getenv("CHAT_MEMORY__VERSION", "0.1.0")

    @classmethod
    def model_aliases(cls) -> dict:
        """Alias модели из запроса -> id модели у провайдера"""
        return {
            "deepseek": cls.MODEL_DEEPSEEK,
            "grok": cls.MODEL_GROK,
            "gemma": cls.MODEL_GEMMA,
        }


logging.basicConfig(level=AppConfig.LOG_LEVEL)
logger = logging.getLogger("chat-memory")
