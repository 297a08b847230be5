"""Status listener that keeps the latest state and a short event history."""

import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional

from ..models.security import AlarmStatus, Sensor
from ..logging_config import get_logger
from .interfaces import StatusListener

logger = get_logger("status_tracker")


@dataclass
class StatusEvent:
    """A single notification received from the security service."""
    event_type: str  # "alarm", "sensor", "cat"
    value: Any
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp.isoformat(),
            'event_type': self.event_type,
            'value': self.value
        }


class StatusTracker(StatusListener):
    """Remembers what the security service last reported, for display."""

    def __init__(self, max_events: int = 100):
        self.alarm_status: Optional[AlarmStatus] = None
        self.cat_detected = False
        self._events: Deque[StatusEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def on_alarm_status_changed(self, alarm_status: AlarmStatus) -> None:
        with self._lock:
            self.alarm_status = alarm_status
            self._events.append(StatusEvent("alarm", alarm_status.name))
        logger.info(f"Alarm status: {alarm_status.description}")

    def on_sensor_status_changed(self, sensor: Sensor) -> None:
        with self._lock:
            self._events.append(StatusEvent("sensor", {
                'sensor_id': sensor.sensor_id,
                'name': sensor.name,
                'active': sensor.active
            }))

    def on_cat_detected(self, cat_detected: bool) -> None:
        with self._lock:
            self.cat_detected = cat_detected
            self._events.append(StatusEvent("cat", cat_detected))
        if cat_detected:
            logger.info("DANGER - CAT DETECTED")

    def get_events(self, limit: Optional[int] = None) -> List[StatusEvent]:
        """Most recent events, newest last."""
        with self._lock:
            events = list(self._events)
        if limit is not None:
            events = events[-limit:] if limit > 0 else []
        return events
