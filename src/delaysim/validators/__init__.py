"""Startup validation of delay configuration."""

from .consistency_checker import ConsistencyChecker

__all__ = ["ConsistencyChecker"]
