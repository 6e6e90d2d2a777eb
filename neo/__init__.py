"""
neo - extensible developer CLI.
"""

# Version is loaded from package metadata
try:
    from importlib.metadata import version

    __version__ = version("neo-cli")
except Exception:
    __version__ = "0.1.0"

__all__ = ["__version__"]
