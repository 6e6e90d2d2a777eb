"""
Output presenters for the neo CLI.
"""

from .console import ConsolePresenter

__all__ = ["ConsolePresenter"]
