"""Unit tests for web application."""

import unittest
import io
import shutil
import tempfile
from unittest.mock import Mock
import sys
import os

from PIL import Image

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from catpoint_security.web.app import CatpointWebApp, create_app
from catpoint_security.security_app import SecurityApplication
from catpoint_security.config_manager import ConfigManager
from catpoint_security.services.interfaces import (
    ImageClassifierInterface, SecurityRepositoryInterface
)
from catpoint_security.services.repository import InMemorySecurityRepository


def make_png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(200, 120, 40)).save(buffer, format="PNG")
    return buffer.getvalue()


class TestCatpointWebApp(unittest.TestCase):
    """Test cases for CatpointWebApp."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = tempfile.mkdtemp()
        config_manager = ConfigManager(os.path.join(self.test_dir, "test_config.json"))

        self.classifier = Mock(spec=ImageClassifierInterface)
        self.classifier.image_contains_cat.return_value = False
        self.application = SecurityApplication(
            config_manager=config_manager,
            repository=InMemorySecurityRepository(),
            classifier=self.classifier
        )

        self.web_app = CatpointWebApp(self.application)
        self.web_app.app.config['TESTING'] = True
        self.client = self.web_app.app.test_client()

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def _add_sensor(self, name="Front Door", sensor_type="DOOR"):
        response = self.client.post('/api/sensors', json={'name': name, 'sensor_type': sensor_type})
        self.assertEqual(response.status_code, 201)
        return response.get_json()['data']

    def test_web_app_initialization(self):
        """Test web application initialization."""
        self.assertIs(self.web_app.application, self.application)
        self.assertEqual(self.web_app.app.config['MAX_CONTENT_LENGTH'], 16 * 1024 * 1024)

    def test_create_app(self):
        """Test the app factory."""
        app = create_app(self.application)
        self.assertEqual(app.name, 'catpoint_security.web.app')

    def test_api_status(self):
        """Test status API endpoint."""
        response = self.client.get('/api/status')

        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertTrue(data['success'])
        self.assertEqual(data['data']['alarm_status'], 'NO_ALARM')
        self.assertEqual(data['data']['arming_status'], 'DISARMED')

    def test_api_arming(self):
        """Test arming endpoint."""
        response = self.client.post('/api/arming', json={'arming_status': 'armed_home'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['data']['arming_status'], 'ARMED_HOME')

    def test_api_arming_invalid(self):
        """Test arming endpoint rejects unknown statuses."""
        for body in ({'arming_status': 'PANIC'}, {}):
            with self.subTest(body=body):
                response = self.client.post('/api/arming', json=body)
                self.assertEqual(response.status_code, 400)
                self.assertFalse(response.get_json()['success'])

    def test_api_sensors(self):
        """Test adding, listing and removing sensors."""
        sensor = self._add_sensor()
        self.assertEqual(sensor['name'], 'Front Door')
        self.assertEqual(sensor['sensor_type'], 'DOOR')
        self.assertFalse(sensor['active'])

        listing = self.client.get('/api/sensors').get_json()['data']
        self.assertEqual([s['sensor_id'] for s in listing], [sensor['sensor_id']])

        response = self.client.delete(f"/api/sensors/{sensor['sensor_id']}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.get('/api/sensors').get_json()['data'], [])

    def test_api_add_sensor_invalid(self):
        """Test sensor creation validation."""
        bad_bodies = [
            {'sensor_type': 'DOOR'},
            {'name': '   ', 'sensor_type': 'DOOR'},
            {'name': 'Garage', 'sensor_type': 'LASER'},
        ]
        for body in bad_bodies:
            with self.subTest(body=body):
                response = self.client.post('/api/sensors', json=body)
                self.assertEqual(response.status_code, 400)

    def test_api_sensor_activation(self):
        """Test activating a sensor moves the alarm to pending."""
        sensor = self._add_sensor()
        self.client.post('/api/arming', json={'arming_status': 'ARMED_AWAY'})

        response = self.client.post(f"/api/sensors/{sensor['sensor_id']}/activation",
                                    json={'active': True})

        self.assertEqual(response.status_code, 200)
        data = response.get_json()['data']
        self.assertTrue(data['sensor']['active'])
        self.assertEqual(data['alarm_status'], 'PENDING_ALARM')

    def test_api_sensor_activation_requires_bool(self):
        """Test activation requires a boolean flag."""
        sensor = self._add_sensor()

        response = self.client.post(f"/api/sensors/{sensor['sensor_id']}/activation",
                                    json={'active': 'yes'})

        self.assertEqual(response.status_code, 400)

    def test_non_object_json_body_rejected(self):
        """Test JSON arrays and scalars are rejected with 400."""
        sensor = self._add_sensor()
        urls = ['/api/arming', '/api/sensors', f"/api/sensors/{sensor['sensor_id']}/activation"]
        for url in urls:
            for body in ([True], "ARMED_HOME", 5):
                with self.subTest(url=url, body=body):
                    response = self.client.post(url, json=body)
                    self.assertEqual(response.status_code, 400)
                    self.assertFalse(response.get_json()['success'])

        self.assertEqual(self.application.security_service.arming_status.name, 'DISARMED')

    def test_unknown_sensor_returns_404(self):
        """Test unknown sensor ids map to 404."""
        for method, url, body in (
            ('delete', '/api/sensors/missing', None),
            ('post', '/api/sensors/missing/activation', {'active': True}),
        ):
            with self.subTest(url=url, method=method):
                response = getattr(self.client, method)(url, json=body)
                self.assertEqual(response.status_code, 404)
                self.assertEqual(response.get_json()['kind'], 'unknown_sensor')

    def test_api_scan(self):
        """Test scanning an uploaded image."""
        self.classifier.image_contains_cat.return_value = True
        self.client.post('/api/arming', json={'arming_status': 'ARMED_HOME'})

        response = self.client.post(
            '/api/scan',
            data={'image': (io.BytesIO(make_png_bytes()), 'cat.png')},
            content_type='multipart/form-data'
        )

        self.assertEqual(response.status_code, 200)
        data = response.get_json()['data']
        self.assertTrue(data['cat_detected'])
        self.assertEqual(data['alarm_status'], 'ALARM')
        image = self.classifier.image_contains_cat.call_args[0][0]
        self.assertEqual(image.shape, (8, 8, 3))

    def test_api_scan_bad_upload(self):
        """Test scan rejects missing or unreadable images."""
        response = self.client.post('/api/scan', data={}, content_type='multipart/form-data')
        self.assertEqual(response.status_code, 400)

        response = self.client.post(
            '/api/scan',
            data={'image': (io.BytesIO(b"definitely not an image"), 'cat.png')},
            content_type='multipart/form-data'
        )
        self.assertEqual(response.status_code, 400)
        self.classifier.image_contains_cat.assert_not_called()

    def test_classifier_failure_returns_502(self):
        """Test classifier failures map to 502."""
        self.classifier.image_contains_cat.side_effect = RuntimeError("offline")

        response = self.client.post(
            '/api/scan',
            data={'image': (io.BytesIO(make_png_bytes()), 'cat.png')},
            content_type='multipart/form-data'
        )

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.get_json()['kind'], 'classifier_failure')

    def test_repository_failure_returns_503(self):
        """Test repository failures map to 503."""
        repository = Mock(spec=SecurityRepositoryInterface)
        repository.get_sensors.return_value = set()
        repository.get_alarm_status.side_effect = IOError("disk gone")
        self.application.security_service.repository = repository

        response = self.client.get('/api/status')

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.get_json()['kind'], 'repository_failure')

    def test_api_events(self):
        """Test event history endpoint."""
        self.client.post('/api/arming', json={'arming_status': 'ARMED_HOME'})
        self.client.post('/api/arming', json={'arming_status': 'DISARMED'})

        response = self.client.get('/api/events?limit=1')

        self.assertEqual(response.status_code, 200)
        events = response.get_json()['data']
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0]['event_type'], 'alarm')
        self.assertEqual(events[0]['value'], 'NO_ALARM')


if __name__ == '__main__':
    unittest.main()
