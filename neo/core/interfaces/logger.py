"""
Diagnostic logger contract shared by the runtime and plugins.

Every plugin gets one through PluginContext.logger. Anything a user is
meant to read goes through IPresenter instead.
"""

from abc import ABC, abstractmethod
from typing import Any


class ILogger(ABC):
    """
    Level-filtered diagnostic sink.

    Arguments are merged %-style, as in stdlib logging:
    ``logger.warning('Failed to load plugin "%s": %s', name, err)``.
    """

    @abstractmethod
    def debug(self, message: str, *args: Any, **kwargs: Any) -> None: ...

    @abstractmethod
    def info(self, message: str, *args: Any, **kwargs: Any) -> None: ...

    @abstractmethod
    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Recoverable problems, such as a plugin skipped during loading."""

    @abstractmethod
    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Failures that were contained, such as an event handler raising."""

    @abstractmethod
    def success(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Info-level record of a finished operation, prefixed with a check mark."""

    @abstractmethod
    def set_level(self, level: str) -> None:
        """Change the threshold to 'debug', 'info', 'warning' or 'error'."""
