# uytop/web/__init__.py
"""
Web интерфейс мини-приложения на NiceGUI.
"""

from uytop.web.app import create_app

__all__ = ["create_app"]
