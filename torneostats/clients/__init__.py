"""API clients."""

from .torneopal import TorneopalClient

__all__ = ["TorneopalClient"]
