"""Alarm decision engine.

Receives sensor, arming and image-scan events, reads the current state from
the repository, decides the next alarm status and fans committed changes out
to the registered status listeners.
"""

import logging
import threading
from typing import Any, Callable, List, Optional, Set, Tuple

from ..models.security import Sensor, ArmingStatus, AlarmStatus
from ..config.defaults import DEFAULT_CONFIG
from ..logging_config import get_logger, log_with_context
from .interfaces import (
    SecurityRepositoryInterface,
    ImageClassifierInterface,
    StatusListener,
    NDArray
)
from .error_handler import (
    ErrorHandler,
    ErrorSeverity,
    SecurityServiceError,
    ClassifierError,
    RepositoryError,
    UnknownSensorError
)

logger = get_logger("security_service")

# (description, callable, args) restoring one completed repository write
UndoStep = Tuple[str, Callable[..., Any], Tuple[Any, ...]]


class SecurityService:
    """Derives the alarm status from sensor, arming and camera events.

    Every public operation runs under a single per-instance lock, so the
    read-compute-write-notify sequence on the alarm status is never
    interleaved with another caller's.
    """

    def __init__(self,
                 repository: SecurityRepositoryInterface,
                 image_classifier: ImageClassifierInterface,
                 confidence_threshold: float = DEFAULT_CONFIG["confidence_threshold"],
                 error_handler: Optional[ErrorHandler] = None):
        """
        Initialize the security service.

        Args:
            repository: Durable store of sensors, alarm and arming status
            image_classifier: Service that decides whether an image shows a cat
            confidence_threshold: Threshold handed to the classifier on every scan
            error_handler: Error bookkeeping; a private one is created if omitted
        """
        self.repository = repository
        self.image_classifier = image_classifier
        self.error_handler = error_handler or ErrorHandler()
        self._confidence_threshold = float(confidence_threshold)
        self._status_listeners: List[StatusListener] = []
        self._cat_detected = False
        self._lock = threading.RLock()

    # Listener management

    def add_status_listener(self, listener: StatusListener) -> None:
        """Register a listener. Adding the same listener twice is a no-op."""
        with self._lock:
            if listener not in self._status_listeners:
                self._status_listeners.append(listener)

    def remove_status_listener(self, listener: StatusListener) -> None:
        """Unregister a listener. Unknown listeners are ignored."""
        with self._lock:
            if listener in self._status_listeners:
                self._status_listeners.remove(listener)

    @property
    def status_listeners(self) -> Tuple[StatusListener, ...]:
        with self._lock:
            return tuple(self._status_listeners)

    # Sensor management

    def add_sensor(self, sensor: Sensor) -> None:
        with self._lock:
            self._call_repository("add sensor", self.repository.add_sensor, sensor)

    def remove_sensor(self, sensor: Sensor) -> None:
        with self._lock:
            self._call_repository("remove sensor", self.repository.remove_sensor, sensor)

    # Read accessors

    @property
    def alarm_status(self) -> AlarmStatus:
        with self._lock:
            return self._call_repository("read alarm status", self.repository.get_alarm_status)

    @property
    def arming_status(self) -> ArmingStatus:
        with self._lock:
            return self._call_repository("read arming status", self.repository.get_arming_status)

    @property
    def sensors(self) -> Set[Sensor]:
        with self._lock:
            return set(self._call_repository("read sensors", self.repository.get_sensors))

    @property
    def cat_detected(self) -> bool:
        """Result of the most recent image scan."""
        with self._lock:
            return self._cat_detected

    @property
    def confidence_threshold(self) -> float:
        return self._confidence_threshold

    def set_confidence_threshold(self, threshold: float) -> None:
        with self._lock:
            self._confidence_threshold = float(threshold)
            logger.info(f"Confidence threshold set to {self._confidence_threshold}")

    # Events

    def handle_sensor_change(self, sensor: Sensor, active: bool) -> None:
        """Apply a sensor activation change and re-evaluate the alarm status.

        Sensor churn never changes an ALARM status. Deactivating a sensor that
        is already inactive does nothing at all. If the alarm write fails the
        sensor write is undone, so a retry sees the original state.
        """
        active = bool(active)
        with self._lock:
            was_active = sensor.active
            if not active and not was_active:
                logger.debug(f"Sensor {sensor.sensor_id} already inactive, ignoring deactivation")
                return

            alarm_status = self._call_repository("read alarm status", self.repository.get_alarm_status)
            tracked = self._call_repository("read sensors", self.repository.get_sensors)
            if sensor not in tracked:
                self.error_handler.handle_error("sensor", UnknownSensorError(sensor.sensor_id), ErrorSeverity.LOW)

            any_other_active = any(s.active for s in tracked if s != sensor)
            next_status = self._next_status_for_sensor(alarm_status, active, any_other_active)

            undo: List[UndoStep] = []
            try:
                self._write_sensor(sensor, active, undo)
                if next_status is not None:
                    self._write_alarm_status(next_status, trigger="sensor", previous=alarm_status)
            except RepositoryError:
                self._rollback(undo)
                raise

            self._notify("on_sensor_status_changed", sensor)
            if next_status is None:
                logger.debug(f"Sensor {sensor.sensor_id} change left alarm status at {alarm_status.name}")
            else:
                self._notify("on_alarm_status_changed", next_status)

    def handle_arming_change(self, arming_status: ArmingStatus) -> None:
        """Switch arming mode.

        Disarming always clears the alarm. Arming resets every tracked sensor
        to inactive first; arming home then raises the alarm if the last scan
        saw a cat. A failed write undoes the writes already made.
        """
        with self._lock:
            if arming_status is ArmingStatus.DISARMED:
                reset_sensors = False
                next_alarm: Optional[AlarmStatus] = AlarmStatus.NO_ALARM
                trigger = "disarm"
            elif arming_status in (ArmingStatus.ARMED_HOME, ArmingStatus.ARMED_AWAY):
                reset_sensors = True
                cat_alarm = self._cat_detected and arming_status is ArmingStatus.ARMED_HOME
                next_alarm = AlarmStatus.ALARM if cat_alarm else None
                trigger = "arm_home_cat_memory"
            else:
                raise ValueError(f"Unsupported arming status: {arming_status!r}")

            previous_alarm = None
            if next_alarm is not None:
                previous_alarm = self._call_repository("read alarm status", self.repository.get_alarm_status)

            undo: List[UndoStep] = []
            changed: List[Sensor] = []
            try:
                if reset_sensors:
                    changed = self._reset_sensors(undo)
                if next_alarm is not None:
                    self._write_alarm_status(next_alarm, trigger=trigger, previous=previous_alarm)
                    undo.append(("restore alarm status", self.repository.set_alarm_status, (previous_alarm,)))
                self._call_repository("write arming status", self.repository.set_arming_status, arming_status)
            except RepositoryError:
                self._rollback(undo)
                raise

            for sensor in changed:
                self._notify("on_sensor_status_changed", sensor)
            if next_alarm is not None:
                self._notify("on_alarm_status_changed", next_alarm)
            logger.info(f"Arming status set to {arming_status.name}")

    def handle_image_scan(self, image: NDArray) -> bool:
        """Classify a camera image and update the alarm status.

        The cat-detection memory only changes once the scan's repository
        reads and writes have all succeeded.

        Returns:
            Whether the classifier found a cat
        """
        with self._lock:
            try:
                cat_present = bool(
                    self.image_classifier.image_contains_cat(image, self._confidence_threshold)
                )
            except Exception as e:
                self.error_handler.handle_error("image_classifier", e, ErrorSeverity.HIGH)
                raise ClassifierError(f"Image classification failed: {e}") from e

            next_alarm: Optional[AlarmStatus] = None
            if cat_present:
                arming_status = self._call_repository("read arming status", self.repository.get_arming_status)
                if arming_status is ArmingStatus.ARMED_HOME:
                    next_alarm = AlarmStatus.ALARM
                else:
                    logger.debug(f"Cat detected while {arming_status.name}, camera rules inactive")
            else:
                sensors = self._call_repository("read sensors", self.repository.get_sensors)
                if not any(s.active for s in sensors):
                    next_alarm = AlarmStatus.NO_ALARM

            if next_alarm is not None:
                self._write_alarm_status(
                    next_alarm, trigger="cat_detected" if cat_present else "no_cat"
                )
            self._cat_detected = cat_present

            if next_alarm is not None:
                self._notify("on_alarm_status_changed", next_alarm)
            self._notify("on_cat_detected", cat_present)
            return cat_present

    # Internals

    @staticmethod
    def _next_status_for_sensor(alarm_status: AlarmStatus, active: bool,
                                any_other_active: bool) -> Optional[AlarmStatus]:
        if alarm_status is AlarmStatus.ALARM:
            return None
        if alarm_status is AlarmStatus.NO_ALARM:
            return AlarmStatus.PENDING_ALARM if active else None
        if alarm_status is AlarmStatus.PENDING_ALARM:
            if active:
                return AlarmStatus.ALARM
            return None if any_other_active else AlarmStatus.NO_ALARM
        raise ValueError(f"Unsupported alarm status: {alarm_status!r}")

    def _write_sensor(self, sensor: Sensor, active: bool, undo: List[UndoStep]) -> None:
        """Persist a sensor flag and queue the step that restores it."""
        was_active = sensor.active
        sensor.active = active
        try:
            self._call_repository("update sensor", self.repository.update_sensor, sensor)
        except RepositoryError:
            sensor.active = was_active
            raise
        undo.append(("restore sensor", self._restore_sensor, (sensor, was_active)))

    def _restore_sensor(self, sensor: Sensor, active: bool) -> None:
        sensor.active = active
        self.repository.update_sensor(sensor)

    def _reset_sensors(self, undo: List[UndoStep]) -> List[Sensor]:
        """Persist every tracked sensor as inactive; return those that were active."""
        sensors = list(self._call_repository("read sensors", self.repository.get_sensors))
        changed = []
        for sensor in sensors:
            was_active = sensor.active
            self._write_sensor(sensor, False, undo)
            if was_active:
                changed.append(sensor)
        logger.debug(f"Reset {len(sensors)} sensors to inactive")
        return changed

    def _write_alarm_status(self, alarm_status: AlarmStatus, trigger: str,
                            previous: Optional[AlarmStatus] = None) -> None:
        self._call_repository("write alarm status", self.repository.set_alarm_status, alarm_status)
        context = {'current': alarm_status.name, 'trigger': trigger}
        if previous is not None:
            context['previous'] = previous.name
        log_with_context(logger, logging.INFO, f"Alarm status set to {alarm_status.name}", context)

    def _rollback(self, undo: List[UndoStep]) -> None:
        """Undo completed writes, newest first."""
        for description, func, args in reversed(undo):
            try:
                func(*args)
            except Exception as e:
                logger.error(f"Rollback step '{description}' failed: {e}")
                self.error_handler.handle_error("repository", e, ErrorSeverity.CRITICAL)
        if undo:
            logger.warning(f"Rolled back {len(undo)} repository writes after a failed operation")

    def _call_repository(self, description: str, func: Callable[..., Any], *args: Any) -> Any:
        try:
            return func(*args)
        except SecurityServiceError:
            raise
        except Exception as e:
            self.error_handler.handle_error("repository", e, ErrorSeverity.CRITICAL)
            raise RepositoryError(f"Failed to {description}: {e}") from e

    def _notify(self, method_name: str, *args: Any) -> None:
        for listener in list(self._status_listeners):
            try:
                getattr(listener, method_name)(*args)
            except Exception as e:
                logger.error(f"Status listener {listener!r} failed in {method_name}: {e}", exc_info=True)
                self.error_handler.handle_error("status_listener", e, ErrorSeverity.LOW)

