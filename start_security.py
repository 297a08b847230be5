#!/usr/bin/env python3
"""Entry point for the catpoint security system."""

import argparse
import logging
import sys

from catpoint_security.config_manager import ConfigManager
from catpoint_security.logging_config import setup_logging
from catpoint_security.security_app import SecurityApplication
from catpoint_security.services.error_handler import RepositoryError
from catpoint_security.web.app import CatpointWebApp


def main(argv=None):
    """Main entry point for the security system."""
    parser = argparse.ArgumentParser(description="Catpoint home security controller")
    parser.add_argument("--config", default=None, help="Path to the JSON config file")
    parser.add_argument("--debug", action="store_true", help="Run Flask in debug mode")
    args = parser.parse_args(argv)

    config_manager = ConfigManager(args.config)
    config = config_manager.get_config()
    setup_logging(config.log_level, config.log_dir)

    logger = logging.getLogger("catpoint.start_security")
    logger.info("Starting catpoint security system")

    if not config_manager.validate_config():
        logger.error(f"Invalid configuration in {config_manager.config_path}")
        return 1

    try:
        application = SecurityApplication(config_manager)
    except RepositoryError as e:
        logger.error(f"Could not load security state: {e}")
        return 1

    web_app = CatpointWebApp(application)
    web_app.run(host=config.web_host, port=config.web_port, debug=args.debug)
    return 0


if __name__ == "__main__":
    sys.exit(main())
