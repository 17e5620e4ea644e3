from __future__ import annotations

from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from coursesphere.core.constants import SESSION_TOKEN_KEY, SESSION_USER_KEY
from coursesphere.core.exceptions import NotAuthenticated, ResourceError
from coursesphere.core.logging import get_logger
from coursesphere.core.security import create_session_token, verify_password
from coursesphere.integrations.api import ResourceClient
from coursesphere.modules.auth.models import Session, User
from coursesphere.modules.auth.repository import SessionStore
from coursesphere.schemas.user import Credentials
from coursesphere.validators.forms import validate_credentials

logger = get_logger(__name__)


class IdentityProvider:
    """Holds the current identity and owns the session lifecycle.

    Create one per application, call ``restore()`` on start-up and pass it to
    the services that need the current user. ``logout()`` tears the session
    down and clears the store.
    """

    def __init__(self, client: ResourceClient, store: SessionStore):
        self.client = client
        self.store = store
        self.session: Optional[Session] = None

    @classmethod
    def open(cls, client: ResourceClient, store: SessionStore) -> "IdentityProvider":
        provider = cls(client, store)
        provider.restore()
        return provider

    @property
    def current_user(self) -> Optional[User]:
        return self.session.user if self.session else None

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    def require_user(self) -> User:
        if self.session is None:
            raise NotAuthenticated()
        return self.session.user

    def restore(self) -> Optional[Session]:
        """Rebuild the session from storage; drop it if the user record is corrupt."""
        token = self.store.get(SESSION_TOKEN_KEY)
        user_data = self.store.get(SESSION_USER_KEY)
        if not token or not user_data:
            self.session = None
            return None

        try:
            user = User.model_validate_json(user_data)
        except PydanticValidationError:
            logger.warning("discarding unreadable session")
            self._clear_store()
            self.session = None
            return None

        self.session = Session(token=token, user=user)
        logger.info("session restored", user_id=user.id)
        return self.session

    async def login(self, email: str, password: str) -> bool:
        """Check the credentials against ``/users`` and start a session.

        Returns False for unknown users, wrong passwords and backend
        failures. Malformed input raises ``ValidationError`` first.
        """
        validate_credentials(Credentials(email=email, password=password))

        try:
            rows = await self.client.get("/users", params={"email": email})
        except ResourceError as e:
            logger.error("login lookup failed", email=email, error=str(e))
            return False

        user = self._match(rows, password)
        if user is None:
            logger.warning("login rejected", email=email)
            return False

        public = user.public()
        token = create_session_token(public.id)
        self.store.set(SESSION_TOKEN_KEY, token)
        self.store.set(SESSION_USER_KEY, public.model_dump_json(exclude_none=True))
        self.session = Session(token=token, user=public)

        logger.info("user logged in", user_id=public.id, email=public.email)
        return True

    def logout(self) -> None:
        user_id = self.current_user.id if self.current_user else None
        self._clear_store()
        self.session = None
        logger.info("user logged out", user_id=user_id)

    def _clear_store(self) -> None:
        self.store.remove(SESSION_TOKEN_KEY)
        self.store.remove(SESSION_USER_KEY)

    @staticmethod
    def _match(rows, password: str) -> Optional[User]:
        if not isinstance(rows, list):
            return None
        for row in rows:
            if not isinstance(row, dict):
                continue
            try:
                user = User.model_validate(row)
            except PydanticValidationError:
                continue
            if verify_password(password, user.password):
                return user
        return None
