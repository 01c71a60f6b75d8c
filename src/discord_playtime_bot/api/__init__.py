"""
REST API module for the Discord Playtime Bot.

This module provides REST endpoints for subscription administration.
"""

from .app import create_app

__all__ = ["create_app"]
