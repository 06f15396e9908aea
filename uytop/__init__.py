# uytop/__init__.py
"""
Uytop: Telegram Mini App для объявлений о недвижимости.
"""

__version__ = "1.0.0"
