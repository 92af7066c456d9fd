"""Route group exports."""

from . import cache, health, instances, routes, solutions

__all__ = ["instances", "solutions", "routes", "cache", "health"]
