"""Routers module - FastAPI route handlers"""

from . import config, diff, review

__all__ = ["config", "diff", "review"]
