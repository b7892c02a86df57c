"""
Chat Memory Service.

Многошаговые диалоги с внешними LLM под одним session id
с ограничением истории, отправляемой в модель.
"""

__version__ = "0.1.0"
