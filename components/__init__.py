# components/__init__.py
