"""
Infrastructure Layer.

Адаптеры к внешним системам: база данных, LLM провайдер, механизмы устойчивости.
"""
