# src/app/service/__init__.py
