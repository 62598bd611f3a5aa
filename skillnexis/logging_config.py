# logging_config.py
import logging
import logging.config
from pathlib import Path

QUIET_LOGGERS = ("httpx", "httpcore", "apscheduler", "pymongo")

def setup_logging(log_level: str = "INFO", log_file: str = None):
    """
    Configure console (and optionally rotating file) logging.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_file: optional path; parent directories are created
    """
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    handlers = ['console'] + (['file'] if log_file else [])
    config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
            'detailed': {
                'format': '%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            }
        },
        'handlers': {
            'console': {
                'level': log_level,
                'class': 'logging.StreamHandler',
                'formatter': 'standard',
                'stream': 'ext://sys.stdout'
            }
        },
        'loggers': {
            '': {'handlers': list(handlers), 'level': log_level, 'propagate': False},
            'skillnexis': {'handlers': list(handlers), 'level': log_level, 'propagate': False},
            'uvicorn': {'handlers': list(handlers), 'level': 'INFO', 'propagate': False},
            'uvicorn.access': {'handlers': list(handlers), 'level': 'INFO', 'propagate': False},
        }
    }

    # library chatter stays at WARNING unless we are debugging
    for name in QUIET_LOGGERS:
        config['loggers'][name] = {
            'handlers': list(handlers),
            'level': log_level if log_level == 'DEBUG' else 'WARNING',
            'propagate': False,
        }

    if log_file:
        config['handlers']['file'] = {
            'level': log_level,
            'class': 'logging.handlers.RotatingFileHandler',
            'formatter': 'detailed',
            'filename': log_file,
            'maxBytes': 10485760,  # 10MB
            'backupCount': 5
        }

    logging.config.dictConfig(config)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured with level: {log_level}")
    if log_file:
        logger.info(f"Log file: {log_file}")
