"""Security domain models: sensors and status enums."""

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class SensorType(Enum):
    """Kinds of sensor the controller can track."""
    DOOR = "DOOR"
    WINDOW = "WINDOW"
    MOTION = "MOTION"

    @classmethod
    def from_name(cls, name: str) -> "SensorType":
        return _member_from_name(cls, name)


class ArmingStatus(Enum):
    """Operating mode of the system."""
    DISARMED = "DISARMED"
    ARMED_HOME = "ARMED_HOME"
    ARMED_AWAY = "ARMED_AWAY"

    @property
    def description(self) -> str:
        return _ARMING_DESCRIPTIONS[self]

    @property
    def is_armed(self) -> bool:
        return self is not ArmingStatus.DISARMED

    @classmethod
    def from_name(cls, name: str) -> "ArmingStatus":
        return _member_from_name(cls, name)


class AlarmStatus(Enum):
    """Alarm severity ladder: NO_ALARM < PENDING_ALARM < ALARM."""
    NO_ALARM = "NO_ALARM"
    PENDING_ALARM = "PENDING_ALARM"
    ALARM = "ALARM"

    @property
    def description(self) -> str:
        return _ALARM_DESCRIPTIONS[self]

    @property
    def severity(self) -> int:
        return _ALARM_SEVERITY[self]

    def __lt__(self, other):
        if not isinstance(other, AlarmStatus):
            return NotImplemented
        return self.severity < other.severity

    def __le__(self, other):
        if not isinstance(other, AlarmStatus):
            return NotImplemented
        return self.severity <= other.severity

    @classmethod
    def from_name(cls, name: str) -> "AlarmStatus":
        return _member_from_name(cls, name)


_ARMING_DESCRIPTIONS = {
    ArmingStatus.DISARMED: "Disarmed",
    ArmingStatus.ARMED_HOME: "Armed - At Home",
    ArmingStatus.ARMED_AWAY: "Armed - Away",
}

_ALARM_DESCRIPTIONS = {
    AlarmStatus.NO_ALARM: "Cool and Good",
    AlarmStatus.PENDING_ALARM: "Something is Amiss",
    AlarmStatus.ALARM: "Awooga!",
}

_ALARM_SEVERITY = {
    AlarmStatus.NO_ALARM: 0,
    AlarmStatus.PENDING_ALARM: 1,
    AlarmStatus.ALARM: 2,
}


def _member_from_name(enum_cls, name):
    if not isinstance(name, str):
        raise ValueError(f"Invalid {enum_cls.__name__}: {name!r}")
    try:
        return enum_cls[name.strip().upper()]
    except KeyError:
        raise ValueError(f"Invalid {enum_cls.__name__}: {name!r}") from None


@dataclass(eq=False)
class Sensor:
    """A door, window or motion sensor, identified by ``sensor_id``.

    Two sensors are equal when their ids match, regardless of name,
    type or activation flag.
    """
    sensor_id: str
    sensor_type: SensorType
    active: bool = False
    name: str = ""

    @classmethod
    def create(cls, name: str, sensor_type: SensorType) -> "Sensor":
        """Create an inactive sensor with a freshly generated id."""
        return cls(sensor_id=str(uuid.uuid4()), sensor_type=sensor_type, name=name)

    def __eq__(self, other):
        if not isinstance(other, Sensor):
            return NotImplemented
        return self.sensor_id == other.sensor_id

    def __hash__(self):
        return hash(self.sensor_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sensor_id': self.sensor_id,
            'name': self.name,
            'sensor_type': self.sensor_type.name,
            'active': self.active,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Sensor":
        return cls(
            sensor_id=str(data['sensor_id']),
            sensor_type=SensorType.from_name(data['sensor_type']),
            active=bool(data.get('active', False)),
            name=data.get('name', ""),
        )
