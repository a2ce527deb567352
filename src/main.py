"""ASGI entry point for the shopping-state service."""

from src.application import create_app

app = create_app()

__all__ = ["app"]
