"""Utility functions module."""

from .masking import truncate_for_log

__all__ = ["truncate_for_log"]
