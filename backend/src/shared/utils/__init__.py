"""
Utilities Package

Common utility functions and helpers.

Contents:
=========
- security: JWT validation for the external identity provider

Usage:
======
    from src.shared.utils.security import SecurityUtils
"""

from src.shared.utils.security import SecurityUtils

__all__ = [
    "SecurityUtils",
]
