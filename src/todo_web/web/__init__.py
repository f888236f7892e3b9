"""
Todo Web Module

This module provides the HTML interface and JSON API for Todo Web.
"""

from .server import create_app, start_server

__all__ = ['create_app', 'start_server']
