import os
import logging
from logging.handlers import RotatingFileHandler

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Per-request chatter from the HTTP server and client libraries
NOISY_LOGGERS = ('werkzeug', 'urllib3')


def _level(name):
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(log_dir, log_name='rewards_viewer.log', max_size_mb=10, backup_count=5,
                  level='INFO', library_level='WARNING'):
    """Log to a rotating file under log_dir and to the console."""
    os.makedirs(log_dir, exist_ok=True)

    file_handler = RotatingFileHandler(
        os.path.join(log_dir, log_name),
        maxBytes=max_size_mb*1024*1024,  # Convert MB to bytes
        backupCount=backup_count
    )

    logging.basicConfig(
        level=_level(level),
        format=LOG_FORMAT,
        handlers=[file_handler, logging.StreamHandler()]
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    return logging.getLogger('rewards_viewer')
