# src/phayao_hub/db/__init__.py
"""Engine, session factory and table bootstrap helpers."""

from .session import Base, SessionLocal, create_tables, get_db

__all__ = ["Base", "SessionLocal", "create_tables", "get_db"]
