"""Error shape handed from validation to whatever layer answers the caller."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class ErrorCategory(str, Enum):
    """Coarse classification a caller can branch on without parsing codes."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    DEPENDENCY = "dependency"
    INTERNAL = "internal"


@dataclass(frozen=True)
class ErrorDetail:
    """One classified error with a stable code and free-form string metadata."""

    code: str
    message: str
    category: ErrorCategory
    retryable: bool = False
    metadata: Mapping[str, str] = field(default_factory=dict)

    def summary(self) -> str:
        """Return a single log-safe line, ``CODE: message``."""
        return f"{self.code}: {self.message}"
