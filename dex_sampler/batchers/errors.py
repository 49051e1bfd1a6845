"""
Error handling utilities for sampler batch operations.

This module provides the exception classes raised by the sampler and an
ErrorHandler that classifies and logs remote call failures.
"""

from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


class BatchError(Exception):
    """Base exception for batch operations."""
    pass


class ValidationError(BatchError):
    """Raised when input validation fails."""
    pass


class ContractError(BatchError):
    """Raised when a contract function is missing from the loaded ABI."""
    pass


class UnsupportedProtocolError(BatchError):
    """Raised when a route targets a protocol with no registered sampler."""

    def __init__(self, protocol: Any, side: str = "sample"):
        super().__init__(f"Unsupported {side} sample protocol: {protocol}")
        self.protocol = protocol
        self.side = side


class DecodeError(BatchError):
    """Raised when call results do not match the expected ABI shape."""
    pass


class RemoteExecutionError(BatchError):
    """Raised when the batch eth_call itself fails."""

    def __init__(self, message: str, category: Optional[str] = None):
        super().__init__(message)
        self.category = category


class ErrorHandler:
    """
    Centralized error classification for batch operations.

    Classifies provider exceptions so that failures of the batch call are
    logged with useful context before they propagate to the caller.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def classify_error(self, error: Exception) -> str:
        """
        Classify an error into a category for appropriate handling.

        Args:
            error: Exception to classify

        Returns:
            Error category string
        """
        error_str = str(error).lower()

        # Rate limiting errors
        if any(keyword in error_str for keyword in ['rate limit', 'too many requests', '429']):
            return 'rate_limit'

        # Network connectivity errors
        if any(keyword in error_str for keyword in ['connection', 'timeout', 'timed out', 'network', 'dns']):
            return 'network'

        # Contract execution errors
        if any(keyword in error_str for keyword in ['revert', 'execution reverted', 'out of gas']):
            return 'contract'

        # Validation errors
        if any(keyword in error_str for keyword in ['invalid', 'bad request', '400']):
            return 'validation'

        return 'unknown'

    def log_error(self, error: Exception, context: Dict[str, Any]) -> str:
        """
        Log error with appropriate level and context.

        Args:
            error: Exception to log
            context: Additional context for logging

        Returns:
            The error category
        """
        error_category = self.classify_error(error)

        log_data = {
            'error_type': type(error).__name__,
            'error_category': error_category,
            'error_message': str(error),
            **context
        }

        if error_category == 'validation':
            self.logger.warning("Validation error occurred", extra=log_data)
        elif error_category == 'contract':
            self.logger.error("Contract execution failed", extra=log_data)
        elif error_category == 'rate_limit':
            self.logger.info("Rate limit encountered", extra=log_data)
        else:
            self.logger.warning("Batch operation error", extra=log_data)

        return error_category
