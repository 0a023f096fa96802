import logging
import logging.config

from .config import settings


def setup_logging() -> None:
    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s %(name)s %(levelname)s %(message)s'
            },
        },
        'handlers': {
            'console': {
                'level': settings.LOG_LEVEL,
                'class': 'logging.StreamHandler',
                'formatter': 'standard',
            },
        },
        'loggers': {
            # Quieten noisy third-party loggers
            'httpx': {'level': 'WARNING'},
            'httpcore': {'level': 'WARNING'},
            '': {
                'handlers': ['console'],
                'level': settings.LOG_LEVEL,
            },
        },
    })
