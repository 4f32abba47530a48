"""Logging setup for CLI"""

import logging
import os

from settings import DEBUG_LOG_FILE, LOG_LEVEL


def setup_logging(debug: bool = False) -> None:
    """
    Configure root logging

    In debug mode everything goes to the console and to the debug log file,
    otherwise only LOG_LEVEL and above reach the console.

    Args:
        debug: Whether debug mode is enabled
    """
    root_logger = logging.getLogger()

    # Clear existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if debug:
        root_logger.setLevel(logging.DEBUG)
        console_handler.setLevel(logging.DEBUG)

        log_file = os.path.abspath(DEBUG_LOG_FILE)
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')  # 'a' to append
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    else:
        level = getattr(logging, str(LOG_LEVEL).upper(), logging.INFO)
        root_logger.setLevel(level)
        console_handler.setLevel(level)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)
