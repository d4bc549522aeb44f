"""
Configuration settings for fast-sql.

This module contains the default settings used throughout the package. Each
default can be overridden through an environment variable.
"""
import logging
import os

# Batching
DEFAULT_FLUSH_THRESHOLD = int(os.environ.get("FASTSQL_FLUSH_THRESHOLD", "1000"))

# CSV loading
CSV_READ_BATCH_SIZE = int(os.environ.get("FASTSQL_CSV_BATCH_SIZE", "10000"))

# Adapters
DEFAULT_MYSQL_PORT = 3306
DEFAULT_POSTGRES_PORT = 5432
DEFAULT_TRINO_PORT = 8080
DEFAULT_TRINO_USER = os.environ.get("USER", "admin")
DEFAULT_APPLICATION_NAME = "fast_sql"

# Logging
LOG_LEVEL = os.environ.get("FASTSQL_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.environ.get(
    "FASTSQL_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Set up logging configuration.

    Args:
        verbose: Log at DEBUG level instead of the configured level

    Returns:
        The package logger
    """
    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    logger = logging.getLogger("fast_sql")
    logger.setLevel(level)
    return logger
