"""Unit tests for the status tracker listener."""

import unittest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from catpoint_security.models.security import Sensor, SensorType, AlarmStatus
from catpoint_security.services.status_tracker import StatusTracker


class TestStatusTracker(unittest.TestCase):
    """Test cases for StatusTracker."""

    def setUp(self):
        """Set up test fixtures."""
        self.tracker = StatusTracker(max_events=3)

    def test_initial_state(self):
        """Test nothing has been reported yet."""
        self.assertIsNone(self.tracker.alarm_status)
        self.assertFalse(self.tracker.cat_detected)
        self.assertEqual(self.tracker.get_events(), [])

    def test_records_notifications(self):
        """Test each notification updates state and history."""
        sensor = Sensor("door", SensorType.DOOR, active=True, name="Front Door")

        self.tracker.on_alarm_status_changed(AlarmStatus.PENDING_ALARM)
        self.tracker.on_sensor_status_changed(sensor)
        self.tracker.on_cat_detected(True)

        self.assertEqual(self.tracker.alarm_status, AlarmStatus.PENDING_ALARM)
        self.assertTrue(self.tracker.cat_detected)
        events = self.tracker.get_events()
        self.assertEqual([e.event_type for e in events], ["alarm", "sensor", "cat"])
        self.assertEqual(events[1].value, {'sensor_id': "door", 'name': "Front Door", 'active': True})

    def test_history_is_bounded(self):
        """Test old events are dropped beyond max_events."""
        for _ in range(5):
            self.tracker.on_cat_detected(False)
        self.assertEqual(len(self.tracker.get_events()), 3)

    def test_get_events_limit(self):
        """Test the limit keeps the newest events."""
        self.tracker.on_alarm_status_changed(AlarmStatus.ALARM)
        self.tracker.on_cat_detected(True)

        latest = self.tracker.get_events(limit=1)
        self.assertEqual(len(latest), 1)
        self.assertEqual(latest[0].event_type, "cat")
        self.assertEqual(self.tracker.get_events(limit=0), [])

    def test_event_to_dict(self):
        """Test events serialize for JSON output."""
        self.tracker.on_alarm_status_changed(AlarmStatus.ALARM)
        data = self.tracker.get_events()[0].to_dict()
        self.assertEqual(data['event_type'], "alarm")
        self.assertEqual(data['value'], "ALARM")
        self.assertIn('timestamp', data)


if __name__ == '__main__':
    unittest.main()
