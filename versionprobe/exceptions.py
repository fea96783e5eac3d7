"""Exceptions raised inside the probe.

None of these reach callers of ``detect_version``: the detector treats
them as "this strategy has no answer" and moves on.
"""

from typing import Any, Optional


class ProbeError(Exception):
    """Base exception for all VersionProbe errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class StrategyUnavailable(ProbeError):
    """A strategy's backing resource is missing, unreadable or malformed."""


class ManifestError(StrategyUnavailable):
    """A manifest resource could not be parsed."""

    def __init__(self, lineno: int, reason: str):
        super().__init__(
            f"Malformed manifest at line {lineno}: {reason}",
            details={"lineno": lineno, "reason": reason},
        )
        self.lineno = lineno
