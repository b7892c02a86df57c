"""
Retry механизм для HTTP вызовов LLM провайдера.

Повторяет только транзиентные ошибки (таймауты, 429/502/503/504,
ошибки соединения) с экспоненциальной задержкой через tenacity.
"""

import asyncio
import logging
from typing import Callable, Optional

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger("chat-memory.infrastructure.retry_handler")

RETRYABLE_STATUS_CODES = (429, 502, 503, 504)


def is_retryable_http_error(exception: BaseException) -> bool:
    """
    Можно ли повторить запрос после этой ошибки.

    Args:
        exception: Исключение httpx

    Returns:
        True для таймаутов, ошибок соединения и статусов 429/502/503/504
    """
    if isinstance(exception, (httpx.TimeoutException, httpx.ConnectError)):
        return True

    if isinstance(exception, httpx.HTTPStatusError):
        return exception.response.status_code in RETRYABLE_STATUS_CODES

    return False


async def _sleep(seconds: float) -> None:
    await asyncio.sleep(seconds)


class RetryHandler:
    """
    Декоратор с автоматическими повторами.

    Атрибуты:
        max_retries: Максимальное количество повторов (не считая первой попытки)
        base_delay: Задержка перед первым повтором (секунды)
        max_delay: Максимальная задержка (секунды)
        exponential_base: База для экспоненциального роста задержки
        retry_on: Предикат: повторять ли после данного исключения

    Исключение последней попытки пробрасывается как есть.

    Пример:
        >>> @RetryHandler(max_retries=2, retry_on=is_retryable_http_error)
        ... async def send(payload):
        ...     ...
    """

    def __init__(
        self,
        max_retries: int = 2,
        base_delay: float = 1.0,
        max_delay: float = 10.0,
        exponential_base: float = 2.0,
        retry_on: Optional[Callable[[BaseException], bool]] = None
    ):
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.retry_on = retry_on or (lambda exc: isinstance(exc, Exception))

    def __call__(self, func: Callable) -> Callable:
        return retry(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(
                multiplier=self.base_delay,
                exp_base=self.exponential_base,
                max=self.max_delay
            ),
            retry=retry_if_exception(self.retry_on),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            sleep=_sleep,
            reraise=True,
        )(func)
