"""Core business logic layer.

Subpackages:
- layout: grid geometry and course placement
- schedule: week fetch controller and single-day helpers
"""
__all__ = ["layout", "schedule"]
