#!/usr/bin/env python3
"""
PVR - Recorded content manager
Main entry point for the application
"""

import os
import logging
import logging.handlers
import sys
from pathlib import Path

import uvicorn

from pvr.core.config import Config, set_config

logger = logging.getLogger(__name__)


def setup_logging(config: Config) -> str:
    """Console plus rotating file logging from the `logging` config section"""
    log_file = config.get('logging.file', './logs/pvr.log')
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=config.get('logging.max_size_mb', 10) * 1024 * 1024,
        backupCount=config.get('logging.backup_count', 5)
    )
    console_handler = logging.StreamHandler(sys.stdout)
    for handler in (file_handler, console_handler):
        handler.setFormatter(formatter)

    level = getattr(logging, str(config.get('logging.level', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(level=level, handlers=[console_handler, file_handler])
    return log_file


def main():
    """Main entry point"""
    try:
        config = Config()
    except (FileNotFoundError, ValueError) as e:
        print(f"Cannot load configuration: {e}", file=sys.stderr)
        print("Please create a configuration file based on config/config.example.yaml", file=sys.stderr)
        sys.exit(1)

    log_file = setup_logging(config)
    set_config(config)

    logger.info("PVR - Recorded content manager")
    logger.info(f"Log file: {log_file}")

    # Recording roots must exist before the cleaner lists them
    for recorded_dir in config.recorded:
        Path(recorded_dir['path']).mkdir(parents=True, exist_ok=True)
    Path(config.thumbnail).mkdir(parents=True, exist_ok=True)
    Path(config.drop_log).mkdir(parents=True, exist_ok=True)

    host = config.get('web.host', '0.0.0.0')
    port = config.get('web.port', 8888)
    dev_mode = os.getenv('DEV_MODE', '0') == '1'

    logger.info(f"API will be available at: http://{host}:{port}" + (" (auto-reload)" if dev_mode else ""))

    uvicorn.run(
        "pvr.web.api:app",
        host=host,
        port=port,
        log_level="info",
        access_log=False,
        reload=dev_mode,
        reload_dirs=["pvr"] if dev_mode else None
    )


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
