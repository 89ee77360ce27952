# ============================================================================
# Logging Configuration Section
# ============================================================================
# Sets up the loggers used across the resolver:
# - Main logger: overall resolution flow and terminal errors
# - Maven logger: POM fetches and the parent POM walk
# - Version resolve logger: tag/branch candidate checks
# - URL construction logger: path probing and final URL assembly
# - HTTP logger: outcome of every network call
# Each logger writes to the console and to its own file under the log directory

import logging
import os

from .config import LOG_DIR

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

LOGGER_FILES = {
    "maven": ("maven_utils", "maven.log"),
    "version_resolve": ("version_resolve", "version_resolve.log"),
    "url": ("url_construction", "url_construction.log"),
    "http": ("http", "http.log"),
}


def setup_logging(log_dir: str = LOG_DIR, level: int = logging.INFO):
    os.makedirs(log_dir, exist_ok=True)

    # Configure the main logger; console output goes through the root handlers
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(os.path.join(log_dir, 'dependency_git_repo.log'), encoding='utf-8'),
            logging.StreamHandler()
        ]
    )
    loggers = {"main": logging.getLogger('main')}

    for key, (name, filename) in LOGGER_FILES.items():
        named_logger = logging.getLogger(name)
        named_logger.setLevel(level)
        handler = logging.FileHandler(os.path.join(log_dir, filename), encoding='utf-8')
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        named_logger.addHandler(handler)
        loggers[key] = named_logger

    return loggers
