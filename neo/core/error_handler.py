"""
Process-level error handling and recovery strategies.

ErrorHandler is the last stop for failures at the CLI boundary: it gives
registered recovery strategies a chance, then reports and exits.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from .exceptions import AppError, ErrorCategory, ErrorSeverity, UnknownError
from .interfaces.logger import ILogger
from .interfaces.presenter import IPresenter
from .result import Result, is_failure


def _get_logger() -> ILogger:
    from ..services.logging import NullLogger

    return NullLogger()


class ErrorRecoveryStrategy(ABC):
    """A way of recovering from some class of AppError."""

    @abstractmethod
    def can_recover(self, error: AppError) -> bool:
        pass

    @abstractmethod
    def recover(self, error: AppError) -> None:
        """Attempt recovery; raising means recovery failed."""
        pass


class RetryStrategy(ErrorRecoveryStrategy):
    """
    Waits out transient failures.

    Applies to network and filesystem errors. recover() only waits; it
    does not re-run the failing operation.
    """

    RECOVERABLE_CATEGORIES = frozenset({ErrorCategory.NETWORK, ErrorCategory.FILESYSTEM})

    def __init__(
        self,
        max_retries: int = 3,
        delay: float = 1.0,
        backoff: bool = True,
        logger: ILogger | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.max_retries = max_retries
        self.delay = delay
        self.backoff = backoff
        self._logger = logger or _get_logger()
        self._sleep = sleep

    def can_recover(self, error: AppError) -> bool:
        return error.category in self.RECOVERABLE_CATEGORIES

    def recover(self, error: AppError) -> None:
        for attempt in range(1, self.max_retries + 1):
            wait = self.delay * attempt if self.backoff else self.delay
            self._sleep(wait)
            self._logger.info("Retry attempt %d after %.1fs (%s)", attempt, wait, error.code)


class ErrorHandler:
    """Global handler for errors that escape command execution."""

    def __init__(self, presenter: IPresenter, logger: ILogger | None = None) -> None:
        self._presenter = presenter
        self._logger = logger or _get_logger()
        self._strategies: list[ErrorRecoveryStrategy] = []

    def register_strategy(self, strategy: ErrorRecoveryStrategy) -> None:
        self._strategies.append(strategy)

    @property
    def strategies(self) -> list[ErrorRecoveryStrategy]:
        return list(self._strategies)

    def handle(self, error: Any) -> None:
        """
        Recover from ``error`` or end the process.

        Returns normally only if a strategy recovered.

        Raises:
            SystemExit: With status 1 when no strategy recovers
        """
        app_error = normalize_error(error)

        for strategy in self._strategies:
            if not strategy.can_recover(app_error):
                continue
            try:
                strategy.recover(app_error)
            except Exception as e:
                self._logger.debug(
                    "Recovery with %s failed: %s", type(strategy).__name__, e
                )
                continue
            self._logger.debug("Recovered from %s with %s", app_error.code, type(strategy).__name__)
            return

        self._presenter.print_error(app_error.get_user_message())
        self._logger.debug("%s", app_error.get_detailed_report())
        raise SystemExit(1)


def normalize_error(error: Any) -> AppError:
    """Turn anything raised into an AppError."""
    if isinstance(error, AppError):
        return error
    if isinstance(error, BaseException):
        return UnknownError(str(error) or type(error).__name__, original_error=error)
    return UnknownError(str(error), severity=ErrorSeverity.CRITICAL)


def handle_command_result_sync(result: Result, ui: IPresenter) -> None:
    """
    Report a failed command result and exit; a success is a no-op.

    Raises:
        SystemExit: With status 1 if ``result`` is a failure
    """
    if is_failure(result):
        ui.print_error(result.error.get_user_message())
        raise SystemExit(1)
