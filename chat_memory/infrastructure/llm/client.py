"""
OpenAI-совместимый LLM клиент (по умолчанию OpenRouter).

POST {base_url}/chat/completions через httpx с повторами транзиентных
ошибок и отдельным circuit breaker на каждую модель.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from ...core.config import AppConfig
from ...core.errors import ModelCallError
from ...domain.ports import ILLMProvider
from ..resilience import CircuitBreaker, CircuitOpenError, RetryHandler, is_retryable_http_error

logger = logging.getLogger("chat-memory.infrastructure.llm.client")


class OpenRouterClient(ILLMProvider):
    """
    Клиент chat completions.

    Атрибуты:
        base_url: Базовый URL API (без /chat/completions)
        api_key: Ключ для заголовка Authorization
        timeout: Таймаут запроса (секунды)

    Пример:
        >>> client = OpenRouterClient(api_key="sk-...")
        >>> text = await client.complete(
        ...     model="google/gemma-3-27b-it:free",
        ...     messages=[{"role": "user", "content": "Hello"}],
        ...     max_tokens=1000,
        ...     temperature=0.7
        ... )
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        referer: Optional[str] = None,
        title: Optional[str] = None,
        max_retries: int = 2,
        failure_threshold: int = 5,
        recovery_timeout: int = 60,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Args:
            base_url: URL API (по умолчанию из AppConfig)
            api_key: API ключ (по умолчанию из AppConfig)
            timeout: Таймаут запроса в секундах
            referer: Значение заголовка HTTP-Referer
            title: Значение заголовка X-Title
            max_retries: Повторы транзиентных ошибок
            failure_threshold: Ошибок подряд до открытия circuit модели
            recovery_timeout: Секунд до пробного запроса
            transport: Транспорт httpx (для тестов)
        """
        self.base_url = (base_url or AppConfig.LLM_BASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else AppConfig.LLM_API_KEY
        self.timeout = timeout or AppConfig.LLM_TIMEOUT
        self.referer = referer or AppConfig.HTTP_REFERER
        self.title = title or AppConfig.APP_TITLE

        self._http_client = httpx.AsyncClient(transport=transport, timeout=self.timeout)
        self._retry_handler = RetryHandler(
            max_retries=max_retries,
            base_delay=1.0,
            max_delay=8.0,
            retry_on=is_retryable_http_error
        )
        self._failure_threshold = failure_threshold
        self._recovery_timeout = recovery_timeout
        self._breakers: Dict[str, CircuitBreaker] = {}

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.referer,
            "X-Title": self.title,
        }

    def _breaker_for(self, model: str) -> CircuitBreaker:
        if model not in self._breakers:
            self._breakers[model] = CircuitBreaker(
                name=model,
                failure_threshold=self._failure_threshold,
                recovery_timeout=self._recovery_timeout,
                expected_exception=httpx.HTTPError
            )
        return self._breakers[model]

    async def complete(
        self,
        model: str,
        messages: List[Dict[str, str]],
        max_tokens: int,
        temperature: float
    ) -> str:
        payload: Dict[str, Any] = {
            "model": model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "stream": False,
        }

        logger.info(
            f"Sending chat completion request: model={model}, messages={len(messages)}"
        )

        breaker = self._breaker_for(model)

        @self._retry_handler
        async def _send() -> httpx.Response:
            async def make_request():
                response = await self._http_client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers=self._headers(),
                )
                response.raise_for_status()
                return response

            return await breaker.call(make_request)

        try:
            response = await _send()
        except httpx.HTTPStatusError as e:
            logger.error(f"Model {model} returned HTTP {e.response.status_code}", exc_info=True)
            raise ModelCallError(
                model=model,
                reason=e.response.text[:200] or "HTTP error",
                status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling model {model}: {e}", exc_info=True)
            raise ModelCallError(model=model, reason=str(e) or type(e).__name__) from e
        except CircuitOpenError as e:
            raise ModelCallError(model=model, reason=e.message) from e

        try:
            data = response.json()
        except ValueError as e:
            raise ModelCallError(model=model, reason="Response is not valid JSON") from e

        content = self.extract_content(data)
        if content is None:
            logger.warning(f"Model {model} response has no content: {str(data)[:200]}")
            raise ModelCallError(model=model, reason="Response has no message content")

        logger.info(f"Received response from {model} ({len(content)} chars)")
        return content

    async def close(self):
        """Закрыть HTTP клиент"""
        await self._http_client.aclose()
        logger.debug("OpenRouterClient closed")

    @staticmethod
    def extract_content(data: Any) -> Optional[str]:
        """
        Достать choices[0].message.content.

        Returns:
            Текст ответа или None, если структура неполная
        """
        if not isinstance(data, dict):
            return None
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            return None
        first = choices[0]
        if not isinstance(first, dict):
            return None
        message = first.get("message")
        if not isinstance(message, dict):
            return None
        content = message.get("content")
        return content if isinstance(content, str) else None
