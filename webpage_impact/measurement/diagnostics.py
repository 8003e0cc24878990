"""
Diagnostics sink used by the measurement core for non-fatal findings.

The core never prints directly; it reports through a ``Diagnostics``
object.  The project ``Logger`` satisfies the protocol, and tests pass
a ``RecordingDiagnostics`` to assert on what was reported.
"""

from __future__ import annotations

import dataclasses
from typing import Protocol

from webpage_impact.utils import logger


class Diagnostics(Protocol):
    """Anything that accepts warnings and errors with structured data."""

    def warn(self, message: str, data: dict[str, object] | None = None) -> None: ...

    def error(self, message: str, data: dict[str, object] | None = None) -> None: ...


@dataclasses.dataclass(frozen=True)
class DiagnosticEntry:
    level: str
    message: str
    data: dict[str, object] | None = None


@dataclasses.dataclass
class RecordingDiagnostics:
    """Collects diagnostics in memory instead of printing them."""

    entries: list[DiagnosticEntry] = dataclasses.field(default_factory=list)

    def warn(self, message: str, data: dict[str, object] | None = None) -> None:
        self.entries.append(DiagnosticEntry("warn", message, data))

    def error(self, message: str, data: dict[str, object] | None = None) -> None:
        self.entries.append(DiagnosticEntry("error", message, data))

    @property
    def warnings(self) -> list[str]:
        return [e.message for e in self.entries if e.level == "warn"]

    @property
    def errors(self) -> list[str]:
        return [e.message for e in self.entries if e.level == "error"]


def default_diagnostics() -> Diagnostics:
    """Return the logger-backed sink used when none is injected."""
    return logger.create_logger("WebpageImpact")
