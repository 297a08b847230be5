"""Services for the catpoint security system."""

from .interfaces import (
    SecurityRepositoryInterface,
    ImageClassifierInterface,
    StatusListener
)
from .error_handler import (
    ErrorKind,
    ErrorSeverity,
    ErrorHandler,
    SecurityServiceError,
    UnknownSensorError,
    ClassifierError,
    RepositoryError
)
from .security_service import SecurityService

__all__ = [
    'SecurityRepositoryInterface',
    'ImageClassifierInterface',
    'StatusListener',
    'ErrorKind',
    'ErrorSeverity',
    'ErrorHandler',
    'SecurityServiceError',
    'UnknownSensorError',
    'ClassifierError',
    'RepositoryError',
    'SecurityService'
]
