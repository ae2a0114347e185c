# src/sqlab/web_interface/run_api.py
import logging

import uvicorn

from sqlab.config.app_config import SQLabConfig
from sqlab.config.logging_config import LoggingConfig

# Configure logging
logging_config = LoggingConfig()
logging_config.configure()
logger = logging.getLogger(__name__)


def run_api():
    """Run the FastAPI application."""
    app_config = SQLabConfig()
    logger.info(f"Starting SQLab API on port {app_config.port}")

    uvicorn.run(
        "sqlab.web_interface.app:app",
        host=str(app_config.get('host')),
        port=app_config.port,
        reload=bool(app_config.get('reload'))
    )


if __name__ == "__main__":
    run_api()
