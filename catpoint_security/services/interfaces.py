"""Service interfaces and abstract base classes."""

from abc import ABC, abstractmethod
from typing import Set

import numpy as np

from ..models.security import Sensor, ArmingStatus, AlarmStatus

NDArray = np.ndarray


class SecurityRepositoryInterface(ABC):
    """Interface for durable sensor, alarm and arming state."""

    @abstractmethod
    def add_sensor(self, sensor: Sensor) -> None:
        """Start tracking a sensor, replacing any sensor with the same id."""
        pass

    @abstractmethod
    def remove_sensor(self, sensor: Sensor) -> None:
        """Stop tracking a sensor. Untracked sensors are ignored."""
        pass

    @abstractmethod
    def update_sensor(self, sensor: Sensor) -> None:
        """Persist a sensor's state, adding it if it is not tracked yet."""
        pass

    @abstractmethod
    def get_sensors(self) -> Set[Sensor]:
        """Get all tracked sensors."""
        pass

    @abstractmethod
    def get_sensor(self, sensor_id: str) -> Sensor:
        """Get a tracked sensor by id, raising UnknownSensorError if absent."""
        pass

    @abstractmethod
    def get_alarm_status(self) -> AlarmStatus:
        """Get the current alarm status."""
        pass

    @abstractmethod
    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        """Persist a new alarm status."""
        pass

    @abstractmethod
    def get_arming_status(self) -> ArmingStatus:
        """Get the current arming status."""
        pass

    @abstractmethod
    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        """Persist a new arming status."""
        pass


class ImageClassifierInterface(ABC):
    """Interface for camera image classification."""

    @abstractmethod
    def image_contains_cat(self, image: NDArray, confidence_threshold: float) -> bool:
        """Report whether a cat is present with at least the given confidence."""
        pass


class StatusListener(ABC):
    """Receives alarm, sensor and cat-detection changes from the security service."""

    @abstractmethod
    def on_alarm_status_changed(self, alarm_status: AlarmStatus) -> None:
        """Called after a new alarm status has been committed."""
        pass

    @abstractmethod
    def on_sensor_status_changed(self, sensor: Sensor) -> None:
        """Called after a sensor's activation flag has been persisted."""
        pass

    @abstractmethod
    def on_cat_detected(self, cat_detected: bool) -> None:
        """Called after every completed image scan."""
        pass
