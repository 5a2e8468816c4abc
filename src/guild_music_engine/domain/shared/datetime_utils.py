"""Date/time helpers.

- Always store and operate on timezone-aware UTC datetimes.
- Provide the string formats used across the engine (DB rows, playlist ids, Discord).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from ...domain.shared.messages import ErrorMessages


@dataclass(frozen=True, slots=True)
class UtcDateTime:
    """A tiny value-object wrapper around a timezone-aware UTC `datetime`."""

    dt: datetime

    def __post_init__(self) -> None:
        if self.dt.tzinfo is None:
            raise ValueError(ErrorMessages.TIMEZONE_REQUIRED_UTC_DATETIME)
        object.__setattr__(self, "dt", self.dt.astimezone(UTC))

    @classmethod
    def now(cls) -> UtcDateTime:
        return cls(datetime.now(UTC))

    @classmethod
    def from_iso(cls, value: str) -> UtcDateTime:
        # Accepts: '...+00:00' or '...Z'
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return cls(datetime.fromisoformat(value))

    @property
    def iso(self) -> str:
        """RFC3339/ISO8601 with explicit offset (+00:00)."""
        return self.dt.isoformat()

    @property
    def unix_seconds(self) -> int:
        return int(self.dt.timestamp())

    @property
    def unix_millis(self) -> int:
        return int(self.dt.timestamp() * 1000)

    def discord_timestamp(self, style: str = "R") -> str:
        """Discord timestamp markup, e.g. 'R' (relative) or 'd' (short date)."""
        return f"<t:{self.unix_seconds}:{style}>"


def utcnow() -> datetime:
    """Timezone-aware now in UTC."""
    return datetime.now(UTC)
