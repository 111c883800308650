"""Biodiversity Hub web application entry point."""

import logging

from biohub.config import ConfigManager
from biohub.system.structlog_configurator import configure_structlog
from biohub.web.core.factory import create_app

# Configure logging before anything else imports and creates loggers
config_manager = ConfigManager()
config = config_manager.load()
configure_structlog(config)

# Disable uvicorn access logger since we have our own structured logging middleware
logging.getLogger("uvicorn.access").disabled = True

app = create_app()
