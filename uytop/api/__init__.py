# uytop/api/__init__.py
"""
JSON API мини-приложения (FastAPI).
"""

from uytop.api.routes import router

__all__ = ["router"]
