# core/numeric/__init__.py
