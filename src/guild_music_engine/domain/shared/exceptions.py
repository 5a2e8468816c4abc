"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class BusinessRuleViolationError(DomainError):
    """Raised when a business rule is violated."""

    def __init__(self, rule: str, message: str | None = None) -> None:
        msg = message or f"Business rule violated: {rule}"
        super().__init__(msg, code="BUSINESS_RULE_VIOLATION")
        self.rule = rule


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class ResolutionFailedError(DomainError):
    """Raised by a track resolver when a query yields nothing playable."""

    def __init__(self, query: str, message: str | None = None) -> None:
        msg = message or f"Could not resolve '{query}'"
        super().__init__(msg, code="RESOLUTION_FAILED")
        self.query = query


class StreamOpenFailedError(DomainError):
    """Raised by an audio transport when a stream cannot be opened."""

    def __init__(self, track_title: str, message: str | None = None) -> None:
        msg = message or f"Could not open audio stream for '{track_title}'"
        super().__init__(msg, code="STREAM_OPEN_FAILED")
        self.track_title = track_title
