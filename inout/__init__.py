# inout/__init__.py
