"""
Shared Domain Kernel

Contains the exceptions, constrained types, and events shared across the engine.
"""

from guild_music_engine.domain.shared.exceptions import (
    BusinessRuleViolationError,
    DomainError,
    InvalidOperationError,
    ResolutionFailedError,
    StreamOpenFailedError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "BusinessRuleViolationError",
    "InvalidOperationError",
    "ResolutionFailedError",
    "StreamOpenFailedError",
]
