"""
Service implementations for neo.
"""

from .logging import NeoLogger, NullLogger

__all__ = ["NeoLogger", "NullLogger"]
