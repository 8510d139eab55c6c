# ============================================================================
# HEARTBEAT CORE TYPES
# ============================================================================
# STATUS: Core - Severity model, results and check descriptors
# PURPOSE: Types shared by the prober, handler executor and aggregator
# CREATED: 17 OCT 2026
# ============================================================================
"""
Heartbeat Core Types

Severity Hierarchy (worst wins):
- NotSet: No check has reported yet (empty dependency list)
- OK: Dependency operational
- Warning: Operational but slow or redirected
- Critical: Dependency unavailable

Check descriptors are a tagged variant:
- UrlCheck: probe an http/https endpoint
- FunctionCheck: run a user supplied zero-argument check function
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Union

# Applied when a descriptor leaves its timeout at 0
DEFAULT_TIMEOUT_SECONDS = 10.0

# 2xx responses slower than this are reported as Warning
SLOW_RESPONSE_THRESHOLD_SECONDS = 3.0


class InvalidStatusError(ValueError):
    """Raised when a status label cannot be parsed."""

    def __init__(self, text: str):
        super().__init__(f"{text!r} is not a valid status, try [{', '.join(_LABELS.values())}]")
        self.text = text
        self.status = Severity.NOT_SET


class Severity(IntEnum):
    """Health status of a dependency, ordered by rank."""
    NOT_SET = 0
    OK = 1
    WARNING = 2
    CRITICAL = 3

    def __str__(self) -> str:
        return _LABELS[self.value]

    def __format__(self, format_spec: str) -> str:
        return format(str(self), format_spec)

    @classmethod
    def parse(cls, text: str) -> "Severity":
        """
        Parse a status label.

        Raises:
            InvalidStatusError: If text is not exactly one of the labels.
                The error carries ``status = Severity.NOT_SET``.
        """
        for rank, label in _LABELS.items():
            if label == text:
                return cls(rank)
        raise InvalidStatusError(text)

    @staticmethod
    def compare(a: "Severity", b: "Severity") -> int:
        """Compare by rank: -1, 0 or 1."""
        return (int(a) > int(b)) - (int(a) < int(b))

    @classmethod
    def worst(cls, statuses: Iterable["Severity"]) -> "Severity":
        """Aggregate statuses (worst wins, empty is NotSet)."""
        return max(statuses, default=cls.NOT_SET)


_LABELS: Dict[int, str] = {
    0: "NotSet",
    1: "OK",
    2: "Warning",
    3: "Critical",
}


def status_text(rank: int) -> str:
    """Render any rank, including ones outside the defined set."""
    return _LABELS.get(int(rank), f"Status({int(rank)})")


def format_duration(seconds: float) -> str:
    """Format a timeout for messages, e.g. 0.05 -> '50ms', 10 -> '10s'."""
    if seconds < 1:
        return f"{round(seconds * 1000, 3):g}ms"
    return f"{round(seconds, 3):g}s"


@dataclass
class CheckResult:
    """Outcome of a single dependency check."""
    status: Severity = Severity.NOT_SET
    name: str = ""
    resource: str = ""
    latency_ms: float = 0.0
    status_code: int = 0
    message: str = ""

    @classmethod
    def ok(cls, message: str = "ok", **kwargs) -> "CheckResult":
        return cls(status=Severity.OK, message=message, **kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs) -> "CheckResult":
        return cls(status=Severity.WARNING, message=message, **kwargs)

    @classmethod
    def critical(cls, message: str, **kwargs) -> "CheckResult":
        return cls(status=Severity.CRITICAL, message=message, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        return {
            "status": status_text(self.status),
            "name": self.name,
            "resource": self.resource,
            "request_duration_ms": round(self.latency_ms, 3),
            "http_status_code": self.status_code,
            "message": self.message,
        }


@dataclass
class AggregateResult:
    """Worst-case status plus per-dependency results in input order."""
    status: Severity
    results: List[CheckResult] = field(default_factory=list)

    def count(self, status: Severity) -> int:
        return sum(1 for r in self.results if r.status == status)


# ============================================================================
# CHECK DESCRIPTORS
# ============================================================================

CheckFunction = Callable[[], Union[CheckResult, Awaitable[CheckResult]]]


@dataclass(frozen=True)
class CheckDescriptor:
    """
    Base descriptor for a dependency check.

    Attributes:
        name: Display identity of the dependency (not checked for uniqueness)
        kind: Free-form label, e.g. "database" or "website"
        timeout: Seconds; 0 applies DEFAULT_TIMEOUT_SECONDS
    """
    name: str
    kind: str = ""
    timeout: float = 0.0

    def __post_init__(self):
        if self.timeout < 0:
            raise ValueError(f"timeout must be non-negative, got {self.timeout}")


@dataclass(frozen=True)
class UrlCheck(CheckDescriptor):
    """Probe an http or https endpoint with a GET request."""
    url: str = ""


@dataclass(frozen=True)
class FunctionCheck(CheckDescriptor):
    """Run a zero-argument check function (plain or async)."""
    fn: Optional[CheckFunction] = None


def describe_dependency(
    name: str,
    kind: str = "",
    connection: str = "",
    check_fn: Optional[CheckFunction] = None,
    timeout: float = 0.0,
) -> CheckDescriptor:
    """
    Build a descriptor from the flat form used by configuration.

    A check function takes precedence over the connection string.
    """
    if check_fn is not None:
        return FunctionCheck(name=name, kind=kind, timeout=timeout, fn=check_fn)
    return UrlCheck(name=name, kind=kind, timeout=timeout, url=connection)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "SLOW_RESPONSE_THRESHOLD_SECONDS",
    "InvalidStatusError",
    "Severity",
    "status_text",
    "format_duration",
    "CheckResult",
    "AggregateResult",
    "CheckFunction",
    "CheckDescriptor",
    "UrlCheck",
    "FunctionCheck",
    "describe_dependency",
]
