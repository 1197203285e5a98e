import logging
import logging.config
import os
from typing import Any, Dict
from app.core.config import settings

# Log streams written under LOG_DIR, one sub-directory each
LOG_STREAMS = ("app", "error", "access", "audit")


def _rotating_file(stream: str, level: str, formatter: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": formatter,
        "filename": os.path.join(settings.LOG_DIR, stream, f"{stream}.log"),
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
    }


def build_logging_config() -> Dict[str, Any]:
    """dictConfig for the service: console plus rotating app, error, access and audit files"""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(module)s - %(funcName)s:%(lineno)d - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "plain": {
                "format": "%(asctime)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": settings.LOG_LEVEL,
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
            "app_file": _rotating_file("app", settings.LOG_LEVEL, "detailed"),
            "error_file": _rotating_file("error", "ERROR", "detailed"),
            "access_file": _rotating_file("access", "INFO", "plain"),
            "audit_file": _rotating_file("audit", "INFO", "plain"),
        },
        "loggers": {
            "": {
                "level": settings.LOG_LEVEL,
                "handlers": ["console", "app_file", "error_file"],
            },
            "access": {
                "level": "INFO",
                "handlers": ["access_file"],
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "INFO",
                "handlers": ["access_file"],
                "propagate": False,
            },
            # Shipment and account mutations; also echoed to the app log
            "app.audit": {
                "level": "INFO",
                "handlers": ["audit_file"],
                "propagate": True,
            },
            "sqlalchemy.engine": {
                "level": "WARNING",
                "handlers": ["app_file"],
                "propagate": False,
            },
        },
    }


def setup_logging():
    """Setup application logging configuration"""
    for stream in LOG_STREAMS:
        os.makedirs(os.path.join(settings.LOG_DIR, stream), exist_ok=True)

    logging.config.dictConfig(build_logging_config())

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured (level={settings.LOG_LEVEL}, dir={settings.LOG_DIR})")
