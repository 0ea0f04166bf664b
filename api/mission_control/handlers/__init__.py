"""Upstream news handlers for Mission Control.

This module provides handlers for searching external news providers:
- SerpApiHandler: Google News and YouTube searches through SerpApi
"""

from .base import BaseHandler
from .serpapi import SerpApiHandler

__all__ = [
    "BaseHandler",
    "SerpApiHandler",
]
