"""Compact JSON-like variant values, references to them and a cooperative task scheduler."""

__version__ = "7.4.1"

__all__ = ["variant", "reference", "tasker"]