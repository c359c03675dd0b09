# src/authgateway/app/api/__init__.py
from .routes.auth import router as auth_router
from .routes.health import router as health_router

__all__ = ["auth_router", "health_router"]
