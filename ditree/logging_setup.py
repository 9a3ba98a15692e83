import logging
import os
from logging.handlers import RotatingFileHandler

from . import config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

def setup_logging():
    """Setup logging: console always, rotating file when one is configured."""
    cfg = config.load_config()
    log_file = cfg.get("log_file") or ""
    log_level = str(cfg.get("log_level") or "WARNING")

    # Convert string log level to logging constant
    numeric_level = getattr(logging, log_level.upper(), logging.WARNING)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    handlers = []

    if log_file:
        log_file = os.path.expanduser(log_file)
        try:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            handlers.append(RotatingFileHandler(
                log_file,
                maxBytes=10*1024*1024,  # 10MB
                backupCount=5
            ))
        except OSError:
            # Unwritable location, console only
            pass

    # stderr, so the tree on stdout stays clean
    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    handlers.append(console_handler)

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True  # Override any existing configuration
    )

    return logging.getLogger("ditree")
