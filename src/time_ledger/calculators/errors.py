"""Error types raised by the calculators."""

from __future__ import annotations

from typing import Any
from uuid import UUID


class InvalidInputError(ValueError):
    """Raised when a calculator receives malformed input."""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r}: {reason}")


class ConfigurationMissingError(RuntimeError):
    """Raised when no policy could be resolved at any fallback level.

    The system default makes this unreachable; seeing it means the
    resolution chain itself is broken.
    """

    def __init__(self, org_id: UUID, jurisdiction: str | None):
        self.org_id = org_id
        self.jurisdiction = jurisdiction
        super().__init__(
            f"No policy resolved for org {org_id} "
            f"(jurisdiction={jurisdiction!r})"
        )
