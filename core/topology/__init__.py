# core/topology/__init__.py
