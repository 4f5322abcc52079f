# -*- coding: utf-8 -*-
"""Non-fatal diagnostic channel shared by the parser, resolver and compiler."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional

logger = logging.getLogger(__name__)

INFO = "info"
WARNING = "warning"
ERROR = "error"

_LEVELS = {
    INFO: logging.INFO,
    WARNING: logging.WARNING,
    ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class Diagnostic:
    severity: str
    code: str
    message: str
    subject: Optional[str] = None

    def __str__(self) -> str:
        if self.subject:
            return f"[{self.severity}] {self.code}: {self.message} ({self.subject})"
        return f"[{self.severity}] {self.code}: {self.message}"


class DiagnosticLog:
    """Ordered collection of diagnostics; every record is also logged."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self._records: List[Diagnostic] = []
        self._logger = log or logger

    def add(self, severity: str, code: str, message: str, subject: Optional[str] = None) -> Diagnostic:
        record = Diagnostic(severity=severity, code=code, message=message, subject=subject)
        self._records.append(record)
        self._logger.log(_LEVELS.get(severity, logging.INFO), "%s", record)
        return record

    def info(self, code: str, message: str, subject: Optional[str] = None) -> Diagnostic:
        return self.add(INFO, code, message, subject)

    def warning(self, code: str, message: str, subject: Optional[str] = None) -> Diagnostic:
        return self.add(WARNING, code, message, subject)

    def error(self, code: str, message: str, subject: Optional[str] = None) -> Diagnostic:
        return self.add(ERROR, code, message, subject)

    @property
    def records(self) -> List[Diagnostic]:
        return list(self._records)

    def by_code(self, code: str) -> List[Diagnostic]:
        return [r for r in self._records if r.code == code]

    @property
    def has_errors(self) -> bool:
        return any(r.severity == ERROR for r in self._records)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)
