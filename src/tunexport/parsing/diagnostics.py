"""Diagnostics collected while a library is parsed.

Problems that only affect a single entity never abort parsing. They are
recorded here and emitted through the logger handed to the parser, so a
caller (or a test) can inspect exactly what was skipped and why.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


class Severity(Enum):
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


class DiagnosticCode(Enum):
    """What went wrong."""
    UNKNOWN_FIELD = "unknown-field"
    UNEXPECTED_TYPE = "unexpected-type"
    INVALID_TRACK_KEY = "invalid-track-key"
    INVALID_ENTRY = "invalid-entry"
    TRACK_ID_MISMATCH = "track-id-mismatch"
    DUPLICATE_TRACK = "duplicate-track"
    MISSING_PERSISTENT_ID = "missing-persistent-id"
    DUPLICATE_PLAYLIST = "duplicate-playlist"
    MALFORMED_PLAYLIST_ITEM = "malformed-playlist-item"
    MISSING_TRACK = "missing-track"
    DANGLING_PARENT = "dangling-parent"
    IGNORED_PLAYLIST = "ignored-playlist"
    UNRESOLVED_PLAYLIST = "unresolved-playlist"
    MISSING_SECTION = "missing-section"


@dataclass(frozen=True)
class Diagnostic:
    code: DiagnosticCode
    severity: Severity
    message: str
    entity: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict)


class Diagnostics:
    """Collects :class:`Diagnostic` records and forwards them to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.records: List[Diagnostic] = []

    def report(
        self,
        code: DiagnosticCode,
        message: str,
        severity: Severity = Severity.WARNING,
        entity: Optional[str] = None,
        **context: Any,
    ) -> Diagnostic:
        diagnostic = Diagnostic(code=code, severity=severity, message=message, entity=entity, context=context)
        self.records.append(diagnostic)
        if entity is not None:
            self.logger.log(severity.value, f"{entity}: {message}")
        else:
            self.logger.log(severity.value, message)
        return diagnostic

    def debug(self, code: DiagnosticCode, message: str, entity: Optional[str] = None, **context: Any) -> Diagnostic:
        return self.report(code, message, Severity.DEBUG, entity, **context)

    def warning(self, code: DiagnosticCode, message: str, entity: Optional[str] = None, **context: Any) -> Diagnostic:
        return self.report(code, message, Severity.WARNING, entity, **context)

    def error(self, code: DiagnosticCode, message: str, entity: Optional[str] = None, **context: Any) -> Diagnostic:
        return self.report(code, message, Severity.ERROR, entity, **context)

    def with_code(self, code: DiagnosticCode) -> List[Diagnostic]:
        return [record for record in self.records if record.code == code]

    def clear(self) -> None:
        self.records.clear()

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)
