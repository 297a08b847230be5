"""Application shell that wires the security service to its collaborators."""

from typing import Any, Dict, Optional

from .config_manager import ConfigManager
from .models.config import SecurityConfig
from .models.security import Sensor, SensorType, AlarmStatus, ArmingStatus
from .services.interfaces import SecurityRepositoryInterface, ImageClassifierInterface, NDArray
from .services.repository import JsonFileSecurityRepository
from .services.image_classifier import FakeImageClassifier
from .services.security_service import SecurityService
from .services.status_tracker import StatusTracker
from .logging_config import get_logger

logger = get_logger("security_app")


class SecurityApplication:
    """Builds and owns one security service instance and its collaborators."""

    def __init__(self,
                 config_manager: Optional[ConfigManager] = None,
                 repository: Optional[SecurityRepositoryInterface] = None,
                 classifier: Optional[ImageClassifierInterface] = None):
        self.config_manager = config_manager or ConfigManager()
        self.config = self.config_manager.get_config()

        self.repository = repository or JsonFileSecurityRepository(self.config.repository_path)
        self.classifier = classifier or FakeImageClassifier(seed=self.config.classifier_seed)

        self.security_service = SecurityService(
            self.repository,
            self.classifier,
            confidence_threshold=self.config.confidence_threshold
        )
        self.status_tracker = StatusTracker()
        self.security_service.add_status_listener(self.status_tracker)

        self.config_manager.register_change_callback(self._on_config_changed)

        logger.info(
            f"Security application initialized "
            f"(arming={self.security_service.arming_status.name}, "
            f"alarm={self.security_service.alarm_status.name})"
        )

    def _on_config_changed(self, config: SecurityConfig) -> None:
        self.config = config
        if config.confidence_threshold != self.security_service.confidence_threshold:
            self.security_service.set_confidence_threshold(config.confidence_threshold)

    # Operations exposed to the outer surfaces

    def add_sensor(self, name: str, sensor_type: SensorType) -> Sensor:
        sensor = Sensor.create(name, sensor_type)
        self.security_service.add_sensor(sensor)
        logger.info(f"Registered {sensor_type.name} sensor '{name}' as {sensor.sensor_id}")
        return sensor

    def remove_sensor(self, sensor_id: str) -> Sensor:
        sensor = self.repository.get_sensor(sensor_id)
        self.security_service.remove_sensor(sensor)
        logger.info(f"Unregistered sensor {sensor_id}")
        return sensor

    def set_sensor_active(self, sensor_id: str, active: bool) -> Sensor:
        sensor = self.repository.get_sensor(sensor_id)
        self.security_service.handle_sensor_change(sensor, active)
        return sensor

    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        self.security_service.handle_arming_change(arming_status)

    def scan_image(self, image: NDArray) -> bool:
        return self.security_service.handle_image_scan(image)

    def get_status(self) -> Dict[str, Any]:
        """Current state as a JSON-ready dict."""
        alarm_status: AlarmStatus = self.security_service.alarm_status
        arming_status: ArmingStatus = self.security_service.arming_status
        sensors = sorted(self.security_service.sensors, key=lambda s: (s.name, s.sensor_id))

        return {
            'alarm_status': alarm_status.name,
            'alarm_description': alarm_status.description,
            'arming_status': arming_status.name,
            'arming_description': arming_status.description,
            'cat_detected': self.security_service.cat_detected,
            'sensors': [sensor.to_dict() for sensor in sensors],
            'errors': self.security_service.error_handler.get_error_stats()
        }
