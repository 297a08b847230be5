"""
Catpoint Security

Monitoring core of a home-security controller: tracks door, window and
motion sensors, the arming mode and camera cat detection, and derives a
single alarm status from them.
"""

__version__ = "1.0.0"

from .config_manager import ConfigManager
from .models import (
    Sensor,
    SensorType,
    ArmingStatus,
    AlarmStatus,
    SecurityConfig
)
from .services import (
    SecurityRepositoryInterface,
    ImageClassifierInterface,
    StatusListener,
    SecurityService,
    SecurityServiceError,
    UnknownSensorError,
    ClassifierError,
    RepositoryError
)

__all__ = [
    # Core
    'SecurityService',
    'ConfigManager',

    # Data models
    'Sensor',
    'SensorType',
    'ArmingStatus',
    'AlarmStatus',
    'SecurityConfig',

    # Collaborator interfaces
    'SecurityRepositoryInterface',
    'ImageClassifierInterface',
    'StatusListener',

    # Errors
    'SecurityServiceError',
    'UnknownSensorError',
    'ClassifierError',
    'RepositoryError'
]
