"""Default configuration values and constants."""

from typing import Dict, Any

# File paths and directories
DEFAULT_PATHS = {
    "config_file": "config.json",
    "data_dir": "data",
    "logs_dir": "logs"
}

# Default system configuration
DEFAULT_CONFIG: Dict[str, Any] = {
    # Image scanning
    "confidence_threshold": 50.0,
    "classifier_seed": None,

    # Persistence
    "repository_path": f"{DEFAULT_PATHS['data_dir']}/security_state.json",

    # Logging
    "log_level": "INFO",
    "log_dir": DEFAULT_PATHS["logs_dir"],

    # Web interface
    "web_host": "0.0.0.0",
    "web_port": 5000,
    "max_upload_mb": 16
}

CLASSIFIER_SETTINGS = {
    "min_confidence_threshold": 0.0,
    "max_confidence_threshold": 100.0
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
