# uytop/infra/__init__.py
"""
Инфраструктура: PostgreSQL и хостинг изображений.
"""
