"""
Exception hierarchy for the vault index.

Provides layered exception structure for storage, embedding, concurrency
and configuration failures. All exceptions carry a details dict for logging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the index engine
"""

from typing import Any


class VaultIndexException(Exception):
    """Base exception for all vault index errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class StorageError(VaultIndexException):
    """Raised when the durable index file is unavailable or corrupt."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize storage error.

        Args:
            message: Error message
            operation: Operation that failed (load, save, upsert)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class EmbeddingError(VaultIndexException):
    """Raised when the embedding provider fails for a chunk or query."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize embedding error.

        Args:
            message: Error message
            path: Source file path whose chunks could not be embedded
            details: Additional context
        """
        details = details or {}
        if path:
            details["path"] = path
        super().__init__(message, details)


class ConcurrencyError(VaultIndexException):
    """Raised when a mutating call arrives while another mutation is in flight."""

    def __init__(
        self,
        operation: str,
        active_operation: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize busy error.

        Args:
            operation: Rejected operation name
            active_operation: Operation currently holding the index
            details: Additional context
        """
        details = details or {}
        details["operation"] = operation
        details["active_operation"] = active_operation
        super().__init__(
            f"Index is busy: cannot run {operation} while {active_operation} is in progress",
            details,
        )


class ConfigurationError(VaultIndexException):
    """Raised on dimension mismatch or out-of-range retrieval parameters."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize configuration error.

        Args:
            message: Error message
            field: Configuration field that is invalid
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)
