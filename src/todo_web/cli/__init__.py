"""Command-line interface package for Todo Web."""

__all__ = ["main"]


def main(*args, **kwargs):
    """Entry point that defers heavy imports until needed."""
    from .main import cli

    return cli(*args, **kwargs)
