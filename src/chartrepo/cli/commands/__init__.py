"""CLI commands package."""

from . import repo

__all__ = ["repo"]
