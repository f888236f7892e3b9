"""Utility helpers for Todo Web."""
