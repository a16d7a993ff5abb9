"""Service helpers that sit between the API routes and the engine."""

from . import planner

__all__ = ["planner"]
