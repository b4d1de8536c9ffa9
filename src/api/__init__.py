"""
Family Hub API module.

Provides FastAPI HTTP endpoints for families, tasks, events and engagement.
"""

from src.api.main import app, run_server

__all__ = ["app", "run_server"]
