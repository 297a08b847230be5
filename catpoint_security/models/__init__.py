"""Data models for the catpoint security system."""

from .security import Sensor, SensorType, ArmingStatus, AlarmStatus
from .config import SecurityConfig

__all__ = ['Sensor', 'SensorType', 'ArmingStatus', 'AlarmStatus', 'SecurityConfig']
