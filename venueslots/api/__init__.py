"""
HTTP surface for the schedule engine (FastAPI).
"""

from .app import create_app

__all__ = ["create_app"]
