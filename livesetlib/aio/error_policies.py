"""
Error handling policies for directory scans.

A scan that cannot read a directory hands the error to its policy. A policy
either returns, in which case the scan reports an ``error`` event and moves
on to the next sibling, or raises to stop the scan.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..errors import ScanIOError

logger = logging.getLogger(__name__)


class ErrorPolicy(ABC):
    """
    Base class for scan error policies.

    Subclasses decide whether an unreadable directory stops the scan.
    """

    def __init__(self):
        self.errors: List[Dict[str, Any]] = []
        self.skipped_paths: List[str] = []

    @abstractmethod
    async def handle(self, error: Exception, path: str) -> None:
        """
        Handle an error raised while reading a directory.

        Args:
            error: The exception that was raised
            path: The directory being read when the error occurred

        Raises:
            ScanIOError: To stop the scan
        """
        pass

    def _record(self, error: Exception, path: str) -> None:
        self.errors.append({
            'path': path,
            'error': error,
            'error_type': type(error).__name__,
            'error_message': str(error),
        })
        self.skipped_paths.append(path)

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        return {
            'total_errors': len(self.errors),
            'permission_errors': sum(1 for e in self.errors if e['error_type'] == 'PermissionError'),
            'skipped_paths': len(self.skipped_paths),
            'errors': self.errors,
        }


class FailFastPolicy(ErrorPolicy):
    """
    Policy that stops the scan at the first unreadable directory.

    Useful when a partial listing is worse than none.
    """

    async def handle(self, error: Exception, path: str) -> None:
        self._record(error, path)
        raise ScanIOError(path, error) from error


class ContinueOnErrorsPolicy(ErrorPolicy):
    """
    Policy that logs errors and continues the scan.

    This is the default: the unreadable directory is skipped and the scan
    carries on with its siblings.
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize the policy.

        Args:
            verbose: If True, log a warning for each error
        """
        super().__init__()
        self.verbose = verbose

    async def handle(self, error: Exception, path: str) -> None:
        self._record(error, path)
        if self.verbose:
            if isinstance(error, PermissionError):
                logger.warning("Skipping inaccessible path '%s': %s", path, error)
            else:
                logger.warning("Error accessing '%s': %s", path, error)


class CollectErrorsPolicy(ErrorPolicy):
    """
    Policy that collects errors silently, for presenting them at the end.
    """

    async def handle(self, error: Exception, path: str) -> None:
        self._record(error, path)


class ThresholdPolicy(ErrorPolicy):
    """
    Policy that tolerates errors up to a threshold, then stops the scan.

    Some unreadable directories are normal; a great many suggest a systemic
    problem such as scanning the wrong volume.
    """

    def __init__(self, max_errors: int = 10, verbose: bool = True):
        """
        Initialize threshold policy.

        Args:
            max_errors: Maximum errors to tolerate before stopping
            verbose: If True, log a warning for each tolerated error
        """
        super().__init__()
        self.max_errors = max_errors
        self.verbose = verbose

    @property
    def error_count(self) -> int:
        return len(self.errors)

    async def handle(self, error: Exception, path: str) -> None:
        self._record(error, path)
        if self.error_count > self.max_errors:
            raise ScanIOError(path, error) from error
        if self.verbose:
            logger.warning("Error [%d/%d] accessing '%s': %s",
                           self.error_count, self.max_errors, path, error)
