# uytop/core/__init__.py
"""
Доменная логика: профили, регионы, объявления, идентификация.
"""
