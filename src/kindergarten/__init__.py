"""Kindergarten attendance package.

Organized by feature modules (children, attendance, pickup, notifications)
with a thin Flask controller layer over service and repository layers.
"""
from __future__ import annotations

__version__ = "0.1.0"
