"""
HTTP API module.
"""

from resume_interview.api.routes import create_app, router

__all__ = ["create_app", "router"]
