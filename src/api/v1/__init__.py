"""
API v1 package.

Contains versioned routes called by the automation platform.
"""

from src.api.v1.routes import router

__all__ = ["router"]
