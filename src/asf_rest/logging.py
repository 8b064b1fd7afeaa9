"""
This module provides a centralized function for setting up
logging for the adapter and the scripts that embed it.

It features:
-   Configures the root logger.
-   Adds a colorful, formatted handler (`colorlog`) for console output (STDOUT).
-   Adds a standard, non-colored, timestamped file handler for persistent logs.
-   Sets log level based on 'ASF_ENVIRONMENT' setting (from config.py).
-   Quiets the HTTP and Redis client libraries.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from colorlog import ColoredFormatter

from .config import settings

NOISY_LOGGERS = ["urllib3", "requests", "simple_salesforce", "redis"]


def setup_logging(
    script_name: str = "asf_rest",
    log_dir: Union[str, Path] = "logs/",
    log_level_override: Optional[str] = None,
) -> Path:
    """
    Set up the root logging configuration.

    This function should be called once at the start of the main script,
    before the REST adapter is configured. It configures two handlers:
    1.  A console handler (StreamHandler) with colored output.
    2.  A file handler (FileHandler) that logs to a timestamped file in
        the specified `log_dir`.

    Args:
        script_name (str, optional): Base name used for the log file.
        log_dir (Union[str, Path], optional): The directory to save log
            files. Defaults to 'logs/'.
        log_level_override (Optional[str], optional): If provided,
            overrides the log level (e.g., "DEBUG", "INFO").

    Returns:
        Path: The path of the newly created log file.
    """
    if log_level_override:
        level = getattr(logging, log_level_override.upper(), logging.INFO)
    elif settings.ASF_ENVIRONMENT.lower() == "development":
        level = logging.DEBUG
    else:
        level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear any existing handlers (e.g., from previous runs in a notebook)
    root_logger.handlers.clear()

    # CONSOLE HANDLER (with color)
    console_log_format = (
        "%(log_color)s%(levelname)-8s%(reset)s | %(log_color)s%(message)s%(reset)s"
    )
    console_formatter = ColoredFormatter(
        console_log_format,
        log_colors={
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        },
    )
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    # FILE HANDLER (without color)
    file_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    log_path_obj = Path(log_dir)
    try:
        log_path_obj.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        root_logger.warning(f"Could not create log directory {log_dir}. {e}. Using '.'")
        log_path_obj = Path(".")

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file_path = log_path_obj / f"{script_name}_{timestamp}.log"

    try:
        file_handler = logging.FileHandler(log_file_path, mode="w", encoding="utf-8")
        # The file log is *always* DEBUG so request paths are kept
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)
    except OSError as e:
        root_logger.warning(f"Could not create file handler {log_file_path}. {e}")

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    root_logger.info(
        f"Logging initialized. Console level: {logging.getLevelName(level)}"
    )
    root_logger.info(f"Environment: {settings.ASF_ENVIRONMENT}")
    root_logger.info(f"Log file: {log_file_path}")

    return log_file_path
