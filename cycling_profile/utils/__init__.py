"""Utility modules for the application."""

from .auth import ConfigurationError, StravaAuthHelper

__all__ = ["ConfigurationError", "StravaAuthHelper"]
