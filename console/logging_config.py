"""
Logging Configuration
Sets up the package loggers for the calculator.
"""
import logging
import sys
from typing import Optional, Union

_NAMESPACES = ("engine", "console", "backend")


def setup_logging(level: Union[int, str] = logging.WARNING,
                  log_file: Optional[str] = None) -> None:
    """
    Configures the loggers of the 'engine', 'console' and 'backend' packages.

    Args:
        level: Logging level (e.g. logging.DEBUG or "DEBUG")
        log_file: Optional path to save logs to a file.
    """
    if isinstance(level, str):
        name = level
        level = logging.getLevelName(name.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name}")

    # Format: Time - Module - Level - Message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    # stderr keeps log lines out of the REPL's own output
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for namespace in _NAMESPACES:
        logger = logging.getLogger(namespace)
        logger.setLevel(level)
        # Avoid duplicate output when called more than once
        for old in logger.handlers:
            old.close()
        logger.handlers.clear()
        for handler in handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
            logger.addHandler(handler)
        logger.propagate = False

    logging.getLogger("console").debug("Logging initialized.")
