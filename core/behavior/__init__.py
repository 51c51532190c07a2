# core/behavior/__init__.py
