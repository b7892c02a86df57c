"""
Application Layer.

Сервисы сценариев (façade над доменными сервисами) и DTO.
"""
