"""
Dependency injection container for the budget dashboard.

This module wires the session gate, the remote data source and the
aggregation store. Each container owns one store; consumers receive it from
the container instead of importing a shared instance.
"""

from dependency_injector import containers, providers
import requests

from .api import RemoteDataSource
from .config import ConfigManager
from .services import AggregationStore
from .session import SessionGate, TokenStorage


class Container(containers.DeclarativeContainer):
    """
    Centralized dependency injection container for the application.
    """
    config = providers.Configuration()

    token_storage = providers.Singleton(
        TokenStorage,
        path=config.session.token_file
    )

    session_gate = providers.Singleton(
        SessionGate,
        storage=token_storage
    )

    http_session = providers.Singleton(requests.Session)

    remote_data_source = providers.Singleton(
        RemoteDataSource,
        session_gate=session_gate,
        base_url=config.api.base_url,
        timeout=config.api.timeout,
        http_session=http_session
    )

    aggregation_store = providers.Singleton(
        AggregationStore,
        data_source=remote_data_source,
        session_gate=session_gate,
        initial_month=config.initial_month
    )

    @classmethod
    def from_config_manager(cls) -> 'Container':
        """Build a container configured from the environment"""
        manager = ConfigManager()
        container = cls()
        container.config.from_dict({
            'api': {
                'base_url': manager.get('api.base_url'),
                'timeout': manager.get('api.timeout')
            },
            'session': {
                'token_file': manager.get('session.token_file')
            },
            'initial_month': None
        })
        return container
