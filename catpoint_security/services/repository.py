"""Security repository implementations."""

import json
import os
import tempfile
import threading
from typing import Dict, Set, Optional

from ..models.security import Sensor, ArmingStatus, AlarmStatus
from ..utils import ensure_directory_exists
from ..logging_config import get_logger
from .interfaces import SecurityRepositoryInterface
from .error_handler import UnknownSensorError, RepositoryError

logger = get_logger("repository")


class InMemorySecurityRepository(SecurityRepositoryInterface):
    """Keeps sensors, alarm and arming status in process memory."""

    def __init__(self,
                 alarm_status: AlarmStatus = AlarmStatus.NO_ALARM,
                 arming_status: ArmingStatus = ArmingStatus.DISARMED):
        self._sensors: Dict[str, Sensor] = {}
        self._alarm_status = alarm_status
        self._arming_status = arming_status
        self._lock = threading.RLock()

    def add_sensor(self, sensor: Sensor) -> None:
        with self._lock:
            sensors = dict(self._sensors)
            sensors[sensor.sensor_id] = sensor
            self._commit(sensors=sensors)
        logger.debug(f"Added sensor {sensor.sensor_id} ({sensor.sensor_type.name})")

    def remove_sensor(self, sensor: Sensor) -> None:
        with self._lock:
            if sensor.sensor_id not in self._sensors:
                logger.debug(f"Sensor {sensor.sensor_id} not tracked, nothing to remove")
                return
            sensors = dict(self._sensors)
            del sensors[sensor.sensor_id]
            self._commit(sensors=sensors)
        logger.debug(f"Removed sensor {sensor.sensor_id}")

    def update_sensor(self, sensor: Sensor) -> None:
        with self._lock:
            sensors = dict(self._sensors)
            sensors[sensor.sensor_id] = sensor
            self._commit(sensors=sensors)

    def get_sensors(self) -> Set[Sensor]:
        with self._lock:
            return set(self._sensors.values())

    def get_sensor(self, sensor_id: str) -> Sensor:
        with self._lock:
            try:
                return self._sensors[sensor_id]
            except KeyError:
                raise UnknownSensorError(sensor_id) from None

    def get_alarm_status(self) -> AlarmStatus:
        with self._lock:
            return self._alarm_status

    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        with self._lock:
            self._commit(alarm_status=alarm_status)

    def get_arming_status(self) -> ArmingStatus:
        with self._lock:
            return self._arming_status

    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        with self._lock:
            self._commit(arming_status=arming_status)

    def _commit(self,
                sensors: Optional[Dict[str, Sensor]] = None,
                alarm_status: Optional[AlarmStatus] = None,
                arming_status: Optional[ArmingStatus] = None) -> None:
        sensors = self._sensors if sensors is None else sensors
        alarm_status = alarm_status or self._alarm_status
        arming_status = arming_status or self._arming_status

        # Persist first so a failed write leaves the in-memory state untouched
        self._persist(sensors, alarm_status, arming_status)

        self._sensors = sensors
        self._alarm_status = alarm_status
        self._arming_status = arming_status

    def _persist(self, sensors: Dict[str, Sensor], alarm_status: AlarmStatus,
                 arming_status: ArmingStatus) -> None:
        """Hook for durable subclasses."""
        pass


class JsonFileSecurityRepository(InMemorySecurityRepository):
    """Repository that rewrites its whole state to a JSON file after every write."""

    def __init__(self, file_path: str):
        """
        Initialize the repository, loading any previously saved state.

        Args:
            file_path: Path of the JSON state file

        Raises:
            RepositoryError: If an existing state file cannot be parsed
        """
        super().__init__()
        self.file_path = file_path
        self._load()

    def _load(self) -> None:
        if not os.path.exists(self.file_path):
            logger.info(f"No saved state at {self.file_path}, starting with defaults")
            return

        try:
            with open(self.file_path, 'r') as f:
                state = json.load(f)
            alarm_status = AlarmStatus.from_name(state.get('alarm_status', AlarmStatus.NO_ALARM.name))
            arming_status = ArmingStatus.from_name(state.get('arming_status', ArmingStatus.DISARMED.name))
            sensors = [Sensor.from_dict(item) for item in state.get('sensors', [])]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            raise RepositoryError(f"Failed to load security state from {self.file_path}: {e}") from e

        self._alarm_status = alarm_status
        self._arming_status = arming_status
        self._sensors = {sensor.sensor_id: sensor for sensor in sensors}
        logger.info(f"Loaded security state from {self.file_path} with {len(sensors)} sensors")

    def _persist(self, sensors: Dict[str, Sensor], alarm_status: AlarmStatus,
                 arming_status: ArmingStatus) -> None:
        state = {
            'alarm_status': alarm_status.name,
            'arming_status': arming_status.name,
            'sensors': [
                sensor.to_dict()
                for sensor in sorted(sensors.values(), key=lambda s: s.sensor_id)
            ]
        }

        directory = os.path.dirname(os.path.abspath(self.file_path))
        tmp_path: Optional[str] = None
        try:
            ensure_directory_exists(directory)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".security_state", suffix=".tmp")
            with os.fdopen(fd, 'w') as f:
                json.dump(state, f, indent=2)
            os.replace(tmp_path, self.file_path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise RepositoryError(f"Failed to save security state to {self.file_path}: {e}") from e
