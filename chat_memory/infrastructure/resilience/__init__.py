"""
Механизмы устойчивости вызовов LLM провайдера.
"""

from .circuit_breaker import CircuitBreaker, CircuitOpenError, CircuitState
from .retry_handler import RetryHandler, is_retryable_http_error

__all__ = [
    "CircuitBreaker",
    "CircuitOpenError",
    "CircuitState",
    "RetryHandler",
    "is_retryable_http_error",
]
