"""
Configuration management for the budget dashboard.

Values come from the environment, after an optional `.env` file is loaded.
"""

import os
import logging
from typing import Any, Dict, Optional

import structlog
from dotenv import load_dotenv

DEFAULT_API_URL = 'http://localhost:5000/api'
DEFAULT_TOKEN_FILE = '~/.budget_dashboard/session.json'


class ConfigManager:
    """
    Singleton holding the configuration as a nested dictionary.

    Values are read once, on first instantiation, and looked up with dotted
    keys such as ``api.base_url``.
    """
    _instance = None
    _config: Dict[str, Any] = {}

    def __new__(cls):
        if not cls._instance:
            cls._instance = super().__new__(cls)
            cls._load_config()
        return cls._instance

    @classmethod
    def _load_config(cls):
        # Load .env file; real environment variables take precedence
        load_dotenv()

        cls._config = {
            'api': {
                'base_url': os.getenv('BUDGET_API_BASE_URL', DEFAULT_API_URL),
                'timeout': float(os.getenv('BUDGET_API_TIMEOUT', 30))
            },
            'session': {
                'token_file': os.getenv('BUDGET_TOKEN_FILE', DEFAULT_TOKEN_FILE)
            },
            'logging': {
                'level': os.getenv('LOG_LEVEL', 'INFO'),
                'json': os.getenv('LOG_JSON', 'false').lower() == 'true'
            }
        }

    @classmethod
    def get(cls, key: str, default: Optional[Any] = None) -> Any:
        """
        Retrieve a configuration value by dotted key, e.g. ``api.base_url``
        """
        value: Any = cls._config
        for k in key.split('.'):
            if not isinstance(value, dict) or k not in value:
                return default
            value = value[k]
        return value

    @classmethod
    def setup_logging(cls):
        """
        Configure logging based on environment
        """
        log_level = getattr(logging, str(cls.get('logging.level', 'INFO')).upper(), logging.INFO)

        logging.basicConfig(
            level=log_level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        renderer = (structlog.processors.JSONRenderer() if cls.get('logging.json')
                    else structlog.dev.ConsoleRenderer())

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                renderer
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
