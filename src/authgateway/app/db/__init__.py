# src/authgateway/app/db/__init__.py

"""
Lightweight DB package init.

Models are not re-exported here to avoid circular imports.
Import them directly from authgateway.app.db.models.
"""

from .session import Base, build_engine, build_sessionmaker, check_connection, init_models

__all__ = ["Base", "build_engine", "build_sessionmaker", "check_connection", "init_models"]
