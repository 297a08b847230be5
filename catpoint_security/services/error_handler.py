"""Error taxonomy and error bookkeeping for the security service."""

import logging
import threading
import traceback
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional, Any

from ..logging_config import get_logger

logger = get_logger("error_handler")


class ErrorKind(Enum):
    """Kinds of failure surfaced to callers of the security service."""
    UNKNOWN_SENSOR = "unknown_sensor"
    CLASSIFIER_FAILURE = "classifier_failure"
    REPOSITORY_FAILURE = "repository_failure"


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


_SEVERITY_LOG_LEVELS = {
    ErrorSeverity.LOW: logging.WARNING,
    ErrorSeverity.MEDIUM: logging.ERROR,
    ErrorSeverity.HIGH: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


class SecurityServiceError(Exception):
    """Base class for failures reported by the security service."""

    def __init__(self, message: str, kind: ErrorKind):
        super().__init__(message)
        self.kind = kind


class UnknownSensorError(SecurityServiceError):
    """A sensor id is not in the tracked set."""

    def __init__(self, sensor_id: str):
        super().__init__(f"Unknown sensor: {sensor_id}", ErrorKind.UNKNOWN_SENSOR)
        self.sensor_id = sensor_id


class ClassifierError(SecurityServiceError):
    """The image classifier failed to produce a result."""

    def __init__(self, message: str):
        super().__init__(message, ErrorKind.CLASSIFIER_FAILURE)


class RepositoryError(SecurityServiceError):
    """A read or write against the security repository failed."""

    def __init__(self, message: str):
        super().__init__(message, ErrorKind.REPOSITORY_FAILURE)


@dataclass
class ErrorRecord:
    """Record of an error occurrence."""
    component_name: str
    error: Exception
    severity: ErrorSeverity
    timestamp: datetime = field(default_factory=datetime.now)
    traceback_str: str = ""

    @property
    def kind(self) -> Optional[ErrorKind]:
        return getattr(self.error, 'kind', None)


class ErrorHandler:
    """Records, counts and logs errors per component.

    Errors are never retried or recovered here; the handler only keeps
    the bookkeeping so the application shell can report on it.
    """

    def __init__(self, max_records: int = 1000):
        self.max_records = max_records
        self.error_records: List[ErrorRecord] = []
        self.component_error_counts: Dict[str, int] = {}
        self._lock = threading.Lock()

    def handle_error(self, component_name: str, error: Exception, severity: ErrorSeverity) -> ErrorRecord:
        """Record an error from a component and log it."""
        error_record = ErrorRecord(
            component_name=component_name,
            error=error,
            severity=severity,
            traceback_str=traceback.format_exc()
        )

        with self._lock:
            self.error_records.append(error_record)
            if len(self.error_records) > self.max_records:
                del self.error_records[:len(self.error_records) - self.max_records]
            self.component_error_counts[component_name] = self.component_error_counts.get(component_name, 0) + 1

        logger.log(
            _SEVERITY_LOG_LEVELS[severity],
            f"Error in {component_name}: {error} (Severity: {severity.value})"
        )
        return error_record

    def get_error_stats(self) -> Dict[str, Any]:
        """Get error statistics."""
        with self._lock:
            kind_counts: Dict[str, int] = {}
            for record in self.error_records:
                if record.kind is not None:
                    kind_counts[record.kind.value] = kind_counts.get(record.kind.value, 0) + 1
            return {
                "total_errors": len(self.error_records),
                "component_error_counts": dict(self.component_error_counts),
                "kind_counts": kind_counts
            }

    def reset_error_counts(self, component_name: Optional[str] = None) -> None:
        """Reset error counts for a component or all components."""
        with self._lock:
            if component_name:
                if component_name in self.component_error_counts:
                    self.component_error_counts[component_name] = 0
            else:
                for component in self.component_error_counts:
                    self.component_error_counts[component] = 0

    def get_error_summary(self, hours: int = 24) -> Dict[str, Any]:
        """Get summary of errors in the last N hours."""
        cutoff_time = datetime.now() - timedelta(hours=hours)

        with self._lock:
            recent_errors = [e for e in self.error_records if e.timestamp >= cutoff_time]

        component_counts: Dict[str, int] = {}
        severity_counts = {severity.value: 0 for severity in ErrorSeverity}

        for error in recent_errors:
            component_counts[error.component_name] = component_counts.get(error.component_name, 0) + 1
            severity_counts[error.severity.value] += 1

        return {
            "total_errors": len(recent_errors),
            "component_counts": component_counts,
            "severity_counts": severity_counts,
            "time_period_hours": hours
        }
