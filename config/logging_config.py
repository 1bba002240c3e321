"""Logging configuration for the roguelike birth client."""

import logging
import logging.config
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from rich.console import Console
from rich.logging import RichHandler

# Create logs directory lazily; the terminal belongs to the birth screens so
# nothing here ever writes to stdout
LOG_DIR = Path(__file__).parent.parent / "logs"


def stderr_rich_handler() -> RichHandler:
    """Build the console handler; rich defaults to stdout, which the screens own."""
    return RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        markup=False,
    )


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None) -> None:
    """
    Configure structured logging with rich console output on stderr.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file name, created under LOG_DIR
    """
    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer() if sys.stderr.isatty() else structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging_config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "()": "config.logging_config.stderr_rich_handler",
                "level": level,
                "formatter": "default",
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
        "loggers": {
            "src": {
                "level": level,
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }

    # Add file handler if log file is specified
    if log_file:
        LOG_DIR.mkdir(exist_ok=True)
        log_path = LOG_DIR / log_file
        logging_config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": "detailed",
            "filename": str(log_path),
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5,
        }
        logging_config["root"]["handlers"].append("file")
        logging_config["loggers"]["src"]["handlers"].append("file")

    logging.config.dictConfig(logging_config)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structured logger
    """
    return structlog.get_logger(name)
