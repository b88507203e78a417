"""
Session management for the budget dashboard.

``TokenStorage`` persists the access token in a small JSON state file;
``SessionGate`` owns the token lifecycle and is the only writer of that file.
"""

import json
import logging
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from pydantic import BaseModel, Field

from .utils.events import Event, EventBus

logger = logging.getLogger(__name__)

TOKEN_KEY = 'access_token'

SESSION_RESTORED = "session_restored"
LOGGED_IN = "logged_in"
LOGGED_OUT = "logged_out"


class Session(BaseModel):
    """Model for the current authentication state"""
    token: Optional[str] = Field(None, description="Bearer token")

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None


class TokenStorage:
    """
    Durable storage for the session token.

    The state file is a JSON object; the token lives under ``access_token``.
    A missing or unreadable file means there is no token.
    """
    DEFAULT_PATH = Path.home() / ".budget_dashboard" / "session.json"

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path).expanduser() if path else self.DEFAULT_PATH

    def _load_state(self) -> Dict:
        try:
            with open(self.path, 'r') as f:
                state = json.load(f)
        except (FileNotFoundError, json.JSONDecodeError):
            return {}
        return state if isinstance(state, dict) else {}

    def _save_state(self, state: Dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(state, f)

    def load_token(self) -> Optional[str]:
        """Read the persisted token, if any"""
        token = self._load_state().get(TOKEN_KEY)
        return token if isinstance(token, str) else None

    def save_token(self, token: str) -> None:
        state = self._load_state()
        state[TOKEN_KEY] = token
        self._save_state(state)

    def clear_token(self) -> None:
        state = self._load_state()
        if TOKEN_KEY in state:
            del state[TOKEN_KEY]
            self._save_state(state)


class SessionGate:
    """
    Owns the authentication token lifecycle.

    States are unauthenticated and authenticated. There is no network check:
    an expired token is discovered when a request fails with an
    authorization error, and the consumer then calls ``logout``.

    Listeners subscribed with ``subscribe`` receive ``session_restored``,
    ``logged_in`` and ``logged_out`` events.
    """

    def __init__(self, storage: TokenStorage):
        """
        Initialize the session gate.

        Args:
            storage: Durable token storage
        """
        self.storage = storage
        self.session = Session()
        self.events = EventBus()

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    @property
    def token(self) -> Optional[str]:
        return self.session.token

    def subscribe(self, handler: Callable[[Event], None]) -> Callable[[], None]:
        """Listen to every session transition"""
        unsubscribers = [
            self.events.subscribe(name, handler)
            for name in (SESSION_RESTORED, LOGGED_IN, LOGGED_OUT)
        ]

        def unsubscribe() -> None:
            for undo in unsubscribers:
                undo()

        return unsubscribe

    def restore_session(self) -> bool:
        """
        Restore a persisted session on startup.

        Returns:
            bool: True if a usable-looking token was found
        """
        token = self.storage.load_token()
        if not token or not token.strip():
            logger.debug("No persisted session token found")
            return False

        self.session = Session(token=token.strip())
        logger.info("Restored persisted session")
        self.events.publish(SESSION_RESTORED, {})
        return True

    def login(self, token: str) -> None:
        """
        Store the token durably and become authenticated.

        Raises:
            ValueError: If the token is empty
        """
        token = (token or '').strip()
        if not token:
            raise ValueError("Token must not be empty")

        self.storage.save_token(token)
        self.session = Session(token=token)
        logger.info("Logged in")
        self.events.publish(LOGGED_IN, {})

    def logout(self) -> None:
        """Erase the persisted token and become unauthenticated"""
        was_authenticated = self.is_authenticated
        self.storage.clear_token()
        self.session = Session()
        logger.info("Logged out")
        self.events.publish(LOGGED_OUT, {'was_authenticated': was_authenticated})

    def auth_headers(self) -> Dict[str, str]:
        """Headers for outbound requests; a bearer credential only when authenticated"""
        headers = {'Content-Type': 'application/json'}
        if self.session.token:
            headers['Authorization'] = f'Bearer {self.session.token}'
        return headers
