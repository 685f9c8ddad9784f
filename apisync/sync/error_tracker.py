"""
Centralized Error Tracking and Reporting for the Sync Module.

This module defines the exceptions raised while talking to the documentation
service and the workspace API, and an ErrorTracker that aggregates the errors
of one sync run.

Key Features:
- Custom Exception Classes: one class per failure kind (request construction,
  transport, unexpected status, decoding, configuration).
- ErrorTracker: collects errors reported by concurrently running module
  syncs. Reporting is lock-protected; reading happens after the workers join.
- Severity Levels: WARNING for tolerated failures (stale collection
  deletions), ERROR for module failures.
- Recovery Suggestions: authentication failures carry a hint naming the
  credential to check, shown in the run summary.
"""

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Dict, Any

class ErrorSeverity(Enum):
    """
    Defines the severity of an error.
    """
    WARNING = "WARNING"
    ERROR = "ERROR"

@dataclass
class SyncError:
    """
    A structured object representing a single error that occurred during the sync process.
    """
    message: str
    source_id: Optional[str] = None
    severity: ErrorSeverity = ErrorSeverity.ERROR
    details: Dict[str, Any] = field(default_factory=dict)
    recovery_suggestion: Optional[str] = None

    def to_dict(self):
        return {
            "message": self.message,
            "source_id": self.source_id,
            "severity": self.severity.value,
            "details": self.details,
            "recovery_suggestion": self.recovery_suggestion
        }

# Custom Exception Classes
class SyncException(Exception):
    """Base class for all custom sync exceptions."""
    def __init__(self, message: str, source_id: Optional[str] = None, recovery_suggestion: Optional[str] = None):
        self.message = message
        self.source_id = source_id
        self.recovery_suggestion = recovery_suggestion
        super().__init__(self.message)

class ConfigurationError(SyncException):
    """Indicates missing or invalid configuration."""
    pass

class RequestConstructionError(SyncException):
    """Indicates a malformed URL or request."""
    pass

class TransportError(SyncException):
    """Indicates a connection failure or timeout."""
    pass

class UnexpectedStatusError(SyncException):
    """Indicates a response status outside the accepted set."""
    def __init__(self, message: str, status_code: int, body: str = "", source_id: Optional[str] = None, recovery_suggestion: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(f"{message}: {status_code} {body}", source_id=source_id, recovery_suggestion=recovery_suggestion)

class DecodeError(SyncException):
    """Indicates a response body that is not valid JSON."""
    pass


class ErrorTracker:
    """
    A centralized tracker for aggregating errors during a sync run.
    """
    def __init__(self):
        self.errors: List[SyncError] = []
        self._lock = threading.Lock()

    def report(self, message: str, source_id: Optional[str] = None, severity: ErrorSeverity = ErrorSeverity.ERROR, details: Optional[Dict[str, Any]] = None, recovery_suggestion: Optional[str] = None):
        """
        Report a new error.
        """
        error = SyncError(
            message=message,
            source_id=source_id,
            severity=severity,
            details=details or {},
            recovery_suggestion=recovery_suggestion
        )
        with self._lock:
            self.errors.append(error)

    def report_exception(self, exc: SyncException, severity: ErrorSeverity = ErrorSeverity.ERROR, details: Optional[Dict[str, Any]] = None):
        """
        Report an error from a SyncException.
        """
        details = dict(details or {})
        if isinstance(exc, UnexpectedStatusError):
            details.setdefault("status_code", exc.status_code)
        self.report(
            message=exc.message,
            source_id=exc.source_id,
            severity=severity,
            details=details,
            recovery_suggestion=exc.recovery_suggestion
        )

    def get_errors(self, min_severity: ErrorSeverity = ErrorSeverity.WARNING) -> List[SyncError]:
        """
        Get all errors at or above a certain severity level.
        """
        severity_map = {
            ErrorSeverity.WARNING: 1,
            ErrorSeverity.ERROR: 2,
        }
        min_level = severity_map[min_severity]
        with self._lock:
            return [e for e in self.errors if severity_map[e.severity] >= min_level]

    def clear(self):
        """Forget every reported error, before a new run."""
        with self._lock:
            self.errors = []

    def generate_report(self) -> Dict[str, Any]:
        """
        Generate a summary report of all errors.
        """
        all_errors = self.get_errors(ErrorSeverity.WARNING)
        error_count = sum(1 for e in all_errors if e.severity == ErrorSeverity.ERROR)
        return {
            "total_errors": len(all_errors),
            "error_count": error_count,
            "warning_count": len(all_errors) - error_count,
            "errors": [e.to_dict() for e in all_errors]
        }
