"""Configuration components for the catpoint security system."""

from .defaults import (
    DEFAULT_CONFIG,
    DEFAULT_PATHS,
    CLASSIFIER_SETTINGS,
    LOG_LEVELS
)

__all__ = [
    'DEFAULT_CONFIG',
    'DEFAULT_PATHS',
    'CLASSIFIER_SETTINGS',
    'LOG_LEVELS'
]
