"""Bearer-token session management."""

import logging

from wordbook.exceptions import StorageError
from wordbook.interfaces import KeyValueStorage
from wordbook.services.api_service import ApiService
from wordbook.services.cache_service import AUTH_TOKEN_KEY

logger = logging.getLogger(__name__)


class AuthService:
    """Log in, register and log out, keeping the token on the device.

    The token is installed on the ApiService so later mutations carry it,
    and persisted so the session survives a restart (see restore).
    """

    def __init__(self, api: ApiService, storage: KeyValueStorage):
        """Initialize the auth service.

        Args:
            api: API client that receives the token
            storage: Storage where the token is persisted
        """
        self.api = api
        self.storage = storage
        self.token: str | None = None
        self.error: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def restore(self) -> bool:
        """Reinstall a token saved by a previous session.

        Returns:
            True if a token was found and installed
        """
        try:
            token = self.storage.get_item(AUTH_TOKEN_KEY)
        except StorageError as e:
            logger.warning(f"Could not read saved auth token: {e}")
            return False

        if not token:
            return False

        self._set_token(token)
        return True

    def login(self, email: str, password: str) -> bool:
        """Log in and persist the returned token.

        Returns:
            True on success; on failure ``error`` holds the reason
        """
        response = self.api.login(email, password)
        token = response.data.get("token") if isinstance(response.data, dict) else None

        if not response.success or not token:
            self._clear_token()
            self.error = response.error or "Login failed"
            logger.warning(f"Login failed for {email}: {self.error}")
            return False

        try:
            self.storage.set_item(AUTH_TOKEN_KEY, token)
        except StorageError as e:
            # Session still works until the app restarts
            logger.warning(f"Could not persist auth token: {e}")

        self._set_token(token)
        logger.info(f"Logged in as {email}")
        return True

    def register(self, name: str, email: str, password: str) -> bool:
        """Create an account, then log in with it.

        Returns:
            True if both registration and login succeeded
        """
        response = self.api.register(name, email, password)
        if not response.success:
            self._clear_token()
            self.error = response.error or "Registration failed"
            logger.warning(f"Registration failed for {email}: {self.error}")
            return False

        return self.login(email, password)

    def logout(self) -> None:
        """Forget the token locally and on the device."""
        try:
            self.storage.remove_item(AUTH_TOKEN_KEY)
        except StorageError as e:
            logger.warning(f"Could not remove saved auth token: {e}")
        self._clear_token()
        self.error = None

    def _set_token(self, token: str) -> None:
        self.token = token
        self.error = None
        self.api.set_auth_token(token)

    def _clear_token(self) -> None:
        self.token = None
        self.api.set_auth_token(None)
