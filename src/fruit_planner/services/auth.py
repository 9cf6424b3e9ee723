"""Authentication and session storage."""

import json
import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass

from pydantic import ValidationError

from fruit_planner.adapters.api_client import ApiClient, ApiError
from fruit_planner.api.models import AuthPayload
from fruit_planner.domain.users import AuthSession, UserProfile
from fruit_planner.services.storage import AUTH_TOKEN_KEY, USER_DATA_KEY, KeyValueStore

_logger = logging.getLogger(__name__)


class AuthError(ApiError):
    """Raised when login or registration fails."""


@dataclass
class AuthService:
    """Logs users in and out and keeps the session in local storage."""

    api_client: ApiClient
    store: KeyValueStore

    async def login(self, email: str, password: str) -> AuthSession:
        """Log in and store the session."""
        data = await self._authenticate(
            "/auth/login", {"email": email, "password": password}
        )
        session = AuthSession(
            token=data.token, user=data.user.to_domain(name=email.split("@")[0])
        )
        self._save(session)
        return session

    async def register(
        self,
        email: str,
        password: str,
        name: str,
        conditions: Iterable[str] = (),
    ) -> AuthSession:
        """Create an account and store the session."""
        data = await self._authenticate(
            "/auth/register",
            {
                "email": email,
                "password": password,
                "name": name,
                "conditions": list(conditions),
            },
        )
        session = AuthSession(token=data.token, user=data.user.to_domain(name=name))
        self._save(session)
        return session

    def logout(self) -> None:
        """Forget the stored token and user."""
        self.store.delete(AUTH_TOKEN_KEY)
        self.store.delete(USER_DATA_KEY)

    def current_user(self) -> UserProfile | None:
        """Return the stored user, if any."""
        raw = self.store.get(USER_DATA_KEY)
        if not raw:
            return None
        try:
            data = json.loads(raw)
            return UserProfile(
                id=str(data["id"]),
                email=data["email"],
                name=data.get("name") or "",
                conditions=tuple(data.get("conditions") or ()),
            )
        except (ValueError, KeyError, TypeError):
            _logger.warning("Discarding unreadable stored user data")
            self.store.delete(USER_DATA_KEY)
            return None

    def update_user(self, user: UserProfile) -> None:
        """Replace the stored user, keeping the known name if none is given."""
        current = self.current_user()
        if current is not None and current.id == user.id and not user.name:
            user = UserProfile(
                id=user.id,
                email=user.email,
                name=current.name,
                conditions=user.conditions,
            )
        self.store.set(USER_DATA_KEY, json.dumps(asdict(user)))

    async def _authenticate(
        self, endpoint: str, body: dict[str, object]
    ) -> AuthPayload:
        try:
            payload = await self.api_client.post(endpoint, json=body)
        except ApiError as exc:
            _logger.error("Authentication failed at %s: %s", endpoint, exc.message)
            raise AuthError(
                exc.message, status_code=exc.status_code, endpoint=endpoint
            ) from exc
        try:
            return AuthPayload.model_validate(payload)
        except ValidationError as exc:
            _logger.error("Unexpected authentication response from %s", endpoint)
            raise AuthError(
                "Malformed authentication response", endpoint=endpoint
            ) from exc

    def _save(self, session: AuthSession) -> None:
        self.store.set(AUTH_TOKEN_KEY, session.token)
        self.store.set(USER_DATA_KEY, json.dumps(asdict(session.user)))
