"""
Circuit Breaker для вызовов LLM провайдера.

Перестает отправлять запросы модели, которая подряд отвечает ошибками,
и пробует снова после recovery_timeout.
"""

import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Optional

from ...core.errors import InfrastructureError

logger = logging.getLogger("chat-memory.infrastructure.circuit_breaker")


class CircuitState(str, Enum):
    """
    Состояния Circuit Breaker.

    - CLOSED: Нормальная работа, запросы проходят
    - OPEN: Сервис недоступен, запросы блокируются
    - HALF_OPEN: Пробный запрос после таймаута
    """
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitOpenError(InfrastructureError):
    """Исключение: circuit открыт, запрос не отправлялся"""

    def __init__(self, name: str, retry_after: int):
        super().__init__(
            message=(
                f"Circuit breaker '{name}' is OPEN. "
                f"Retry after {retry_after} seconds."
            ),
            details={"name": name, "retry_after": retry_after},
            error_code="CIRCUIT_OPEN"
        )


class CircuitBreaker:
    """
    Circuit Breaker для защиты от каскадных сбоев.

    Атрибуты:
        name: Имя защищаемого ресурса (для логов)
        failure_threshold: Количество ошибок подряд для открытия circuit
        recovery_timeout: Время до пробного запроса (секунды)
        state: Текущее состояние circuit
        failure_count: Счетчик ошибок подряд

    Пример:
        >>> breaker = CircuitBreaker("x-ai/grok-4-fast:free", failure_threshold=5)
        >>> data = await breaker.call(send_request, payload)
    """

    def __init__(
        self,
        name: str = "default",
        failure_threshold: int = 5,
        recovery_timeout: int = 60,
        expected_exception: type = Exception
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.expected_exception = expected_exception

        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.last_failure_time: Optional[datetime] = None

    async def call(self, func: Callable[..., Any], *args, **kwargs) -> Any:
        """
        Вызвать async функцию через Circuit Breaker.

        Raises:
            CircuitOpenError: Если circuit OPEN и таймаут не истек
            Exception: Ошибка самой функции
        """
        if self.state == CircuitState.OPEN:
            if self._should_attempt_reset():
                logger.info(f"Circuit '{self.name}' entering HALF_OPEN state")
                self.state = CircuitState.HALF_OPEN
            else:
                logger.warning(f"Circuit '{self.name}' is OPEN, rejecting request")
                raise CircuitOpenError(self.name, self.recovery_timeout)

        try:
            result = await func(*args, **kwargs)
        except self.expected_exception as e:
            self._on_failure()
            logger.error(f"Circuit '{self.name}' recorded failure: {e}")
            raise

        self._on_success()
        return result

    def _on_success(self):
        if self.state == CircuitState.HALF_OPEN:
            logger.info(f"Circuit '{self.name}' recovered, entering CLOSED state")

        self.failure_count = 0
        self.state = CircuitState.CLOSED

    def _on_failure(self):
        self.failure_count += 1
        self.last_failure_time = datetime.now(timezone.utc)

        # Пробный запрос не удался - сразу обратно в OPEN
        if self.state == CircuitState.HALF_OPEN or self.failure_count >= self.failure_threshold:
            if self.state != CircuitState.OPEN:
                logger.error(
                    f"Circuit '{self.name}' entering OPEN state "
                    f"for {self.recovery_timeout} seconds"
                )
            self.state = CircuitState.OPEN

    def _should_attempt_reset(self) -> bool:
        if not self.last_failure_time:
            return False

        elapsed = datetime.now(timezone.utc) - self.last_failure_time
        return elapsed > timedelta(seconds=self.recovery_timeout)
