"""Configuration data models."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class SecurityConfig:
    """System configuration settings."""
    # Image scanning
    confidence_threshold: float = 50.0  # Percent, passed through to the classifier
    classifier_seed: Optional[int] = None

    # Persistence
    repository_path: str = "data/security_state.json"

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"

    # Web interface
    web_host: str = "0.0.0.0"
    web_port: int = 5000
    max_upload_mb: int = 16
