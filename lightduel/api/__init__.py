"""Lightduel API package - FastAPI backend for the light-cycle duel."""

from lightduel.api.main import app, create_app

__all__ = ["app", "create_app"]
