"""
Data model for Codeship builds.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from buildqueue.core.exceptions import CodeshipAPIError
from buildqueue.core.logging import get_logger

logger = get_logger(__name__)

# Builds requested per listing page
PAGE_SIZE = 50

# Codeship reports a build that is still executing as "testing"
RUNNING_STATUS = "testing"

# Sort key for builds that were never allocated
EARLIEST = datetime.min.replace(tzinfo=timezone.utc)

_FRACTION = re.compile(r"\.(\d+)")


def parse_timestamp(raw: str | None) -> datetime | None:
    """
    Parse an ISO 8601 timestamp as returned by the Codeship API.

    Returns None for an empty value.

    Raises:
        ValueError: If the value is not a valid timestamp
    """
    if not raw:
        return None
    value = raw.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    # fromisoformat before 3.11 only accepts 3 or 6 fraction digits
    value = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value, count=1)
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class Build:
    """Snapshot of a single Codeship build."""

    id: str
    project_id: str
    branch: str
    status: str
    allocated_at: datetime | None = None

    @property
    def is_running(self) -> bool:
        return self.status == RUNNING_STATUS

    @property
    def sort_key(self) -> datetime:
        """Allocation time, with unallocated builds first."""
        return self.allocated_at or EARLIEST

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Build":
        """
        Create a build from a Codeship API payload.

        Raises:
            CodeshipAPIError: If a running build has an unreadable allocated_at
        """
        build_id = str(data.get("uuid", ""))
        status = data.get("status") or ""
        raw_allocated = data.get("allocated_at")

        try:
            allocated_at = parse_timestamp(raw_allocated)
        except ValueError as exc:
            # A running build without a usable time cannot be placed in the queue
            if status == RUNNING_STATUS:
                raise CodeshipAPIError(
                    f"Build {build_id} has invalid allocated_at: {raw_allocated!r}"
                ) from exc
            logger.warning("Ignoring invalid allocated_at %r on build %s", raw_allocated, build_id)
            allocated_at = None

        return cls(
            id=build_id,
            project_id=str(data.get("project_uuid", "")),
            branch=data.get("branch") or "",
            status=status,
            allocated_at=allocated_at,
        )


@dataclass(frozen=True)
class BuildPage:
    """One page of a paginated build listing."""

    builds: list[Build] = field(default_factory=list)
    has_next: bool = False
    is_last_page: bool = True
    next_page: int | None = None
