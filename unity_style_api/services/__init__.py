"""Services used by the route handlers."""

from .checker import CheckerService, get_checker_service

__all__ = ["CheckerService", "get_checker_service"]
