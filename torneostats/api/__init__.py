"""
FastAPI application exposing player season statistics.
"""

__all__ = ["app"]


def __getattr__(name):
    if name == "app":
        from .app import app as _app

        return _app
    raise AttributeError(f"module 'torneostats.api' has no attribute '{name}'")
