"""Flask web application for the catpoint security system."""

from typing import Optional

from flask import Flask, jsonify, request

from ..security_app import SecurityApplication
from ..models.security import SensorType, ArmingStatus
from ..services.error_handler import ErrorKind, SecurityServiceError
from ..utils import decode_image
from ..logging_config import get_logger

logger = get_logger("web")

_ERROR_STATUS_CODES = {
    ErrorKind.UNKNOWN_SENSOR: 404,
    ErrorKind.CLASSIFIER_FAILURE: 502,
    ErrorKind.REPOSITORY_FAILURE: 503,
}


class CatpointWebApp:
    """HTTP control surface: arming, sensors, image scans and status."""

    def __init__(self, application: Optional[SecurityApplication] = None):
        """Initialize web application."""
        self.app = Flask(__name__)

        self.application = application or SecurityApplication()

        self.app.config['MAX_CONTENT_LENGTH'] = self.application.config.max_upload_mb * 1024 * 1024

        self._setup_routes()

        logger.info("Catpoint web application initialized")

    def _setup_routes(self):
        """Setup Flask routes."""

        @self.app.errorhandler(SecurityServiceError)
        def handle_security_error(error):
            status_code = _ERROR_STATUS_CODES.get(error.kind, 500)
            logger.error(f"Request failed ({error.kind.value}): {error}")
            return jsonify({
                'success': False,
                'error': str(error),
                'kind': error.kind.value
            }), status_code

        @self.app.route('/api/status')
        def api_status():
            """Get system status."""
            return jsonify({
                'success': True,
                'data': self.application.get_status()
            })

        @self.app.route('/api/arming', methods=['POST'])
        def api_arming():
            """Change the arming status."""
            data = _json_object()
            if data is None:
                return _bad_request("Request body must be a JSON object")
            try:
                arming_status = ArmingStatus.from_name(data.get('arming_status'))
            except ValueError as e:
                return _bad_request(str(e))

            self.application.set_arming_status(arming_status)
            return jsonify({
                'success': True,
                'data': self.application.get_status()
            })

        @self.app.route('/api/sensors', methods=['GET'])
        def api_list_sensors():
            """List tracked sensors."""
            return jsonify({
                'success': True,
                'data': self.application.get_status()['sensors']
            })

        @self.app.route('/api/sensors', methods=['POST'])
        def api_add_sensor():
            """Register a new sensor."""
            data = _json_object()
            if data is None:
                return _bad_request("Request body must be a JSON object")
            name = data.get('name')
            if not isinstance(name, str) or not name.strip():
                return _bad_request("Sensor name is required")
            try:
                sensor_type = SensorType.from_name(data.get('sensor_type'))
            except ValueError as e:
                return _bad_request(str(e))

            sensor = self.application.add_sensor(name.strip(), sensor_type)
            return jsonify({
                'success': True,
                'data': sensor.to_dict()
            }), 201

        @self.app.route('/api/sensors/<sensor_id>', methods=['DELETE'])
        def api_remove_sensor(sensor_id):
            """Unregister a sensor."""
            sensor = self.application.remove_sensor(sensor_id)
            return jsonify({
                'success': True,
                'data': sensor.to_dict()
            })

        @self.app.route('/api/sensors/<sensor_id>/activation', methods=['POST'])
        def api_sensor_activation(sensor_id):
            """Activate or deactivate a sensor."""
            data = _json_object()
            if data is None:
                return _bad_request("Request body must be a JSON object")
            active = data.get('active')
            if not isinstance(active, bool):
                return _bad_request("'active' must be true or false")

            sensor = self.application.set_sensor_active(sensor_id, active)
            return jsonify({
                'success': True,
                'data': {
                    'sensor': sensor.to_dict(),
                    'alarm_status': self.application.security_service.alarm_status.name
                }
            })

        @self.app.route('/api/scan', methods=['POST'])
        def api_scan():
            """Scan an uploaded camera image for cats."""
            upload = request.files.get('image')
            if upload is None:
                return _bad_request("No image uploaded")
            try:
                image = decode_image(upload.read())
            except ValueError as e:
                return _bad_request(str(e))

            cat_detected = self.application.scan_image(image)
            return jsonify({
                'success': True,
                'data': {
                    'cat_detected': cat_detected,
                    'alarm_status': self.application.security_service.alarm_status.name
                }
            })

        @self.app.route('/api/events')
        def api_events():
            """Recent status notifications."""
            limit = request.args.get('limit', 50, type=int)
            events = self.application.status_tracker.get_events(limit)
            return jsonify({
                'success': True,
                'data': [event.to_dict() for event in events]
            })

    def run(self, host='0.0.0.0', port=5000, debug=False):
        """Run the Flask application."""
        logger.info(f"Starting catpoint web interface on {host}:{port}")
        self.app.run(host=host, port=port, debug=debug, threaded=True)

    def get_app(self):
        """Get the Flask app instance for external WSGI servers."""
        return self.app


def _json_object() -> Optional[dict]:
    """Request body as a dict; empty when absent, None when not a JSON object."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


def _bad_request(message: str):
    return jsonify({
        'success': False,
        'error': message
    }), 400


def create_app(application: Optional[SecurityApplication] = None) -> Flask:
    """Factory function to create Flask app."""
    web_app = CatpointWebApp(application)
    return web_app.get_app()
