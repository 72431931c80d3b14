# charlotte/core/auth_context.py
"""
Session/profile holder.

An ``AuthContext`` is constructed explicitly and handed to whoever needs the
current user; there is no module-level current user. Lifecycle:

    ctx = AuthContext(users, gateway)
    ctx.start(session)               # initial session (may be None)
    ctx.handle_session_change(s)     # on every session-change notification
    ctx.close()                      # unsubscribe + clear

The FastAPI dependency in ``charlotte.core.auth`` builds one per request
from the bearer token. Long-lived holders can instead ``subscribe`` to a
supabase auth client and receive its state changes.
"""
import logging
import uuid
from typing import Any

from sqlmodel import SQLModel

from charlotte.core.gateway import Gateway
from charlotte.models.user import User
from charlotte.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)


class AuthSession(SQLModel):
    """The part of an auth session the application relies on."""

    user_id: uuid.UUID
    email: str | None = None
    access_token: str
    user_metadata: dict[str, Any] = {}

    @classmethod
    def from_supabase(cls, session: Any) -> "AuthSession | None":
        """Adapt a gotrue ``Session`` (or None) from the supabase client."""
        if session is None or session.user is None:
            return None
        return cls(
            user_id=uuid.UUID(str(session.user.id)),
            email=session.user.email,
            access_token=session.access_token,
            user_metadata=session.user.user_metadata or {},
        )


def _default_name(session: AuthSession) -> str:
    """
    Display name for a profile created on first authentication:
    sign-up metadata first, then the local part of the email.
    """
    name = (session.user_metadata.get("nome_completo") or "").strip()
    if name:
        return name
    email = session.email or ""
    if "@" in email:
        return email.split("@", 1)[0]
    return email or "Cliente"


class AuthContext:
    def __init__(self, users: UserRepository, gateway: Gateway):
        self.users = users
        self.gateway = gateway
        self.session: AuthSession | None = None
        self.usuario: User | None = None
        self.loading = True
        self._subscription: Any = None

    def start(self, session: AuthSession | None) -> "AuthContext":
        self.handle_session_change(session)
        self.loading = False
        return self

    def handle_session_change(self, session: AuthSession | None) -> None:
        """Load the profile for a new session, clear it on sign-out."""
        self.session = session
        if session is None:
            self.usuario = None
            return
        self.usuario = self._load_or_provision(session)

    def update_usuario(self, usuario: User) -> None:
        """Replace the held profile after a successful profile edit."""
        self.usuario = usuario

    def subscribe(self, auth_client: Any) -> None:
        """
        Follow a supabase auth client (``client.auth``).

        Picks up the current session, then every later change.
        """
        self.start(AuthSession.from_supabase(auth_client.get_session()))

        def on_change(event: str, session: Any) -> None:
            logger.info("Auth state change: %s", event)
            self.handle_session_change(AuthSession.from_supabase(session))

        self._subscription = auth_client.on_auth_state_change(on_change)

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self.session = None
        self.usuario = None

    def _load_or_provision(self, session: AuthSession) -> User:
        user = self.users.get_by_id(self.gateway, session.user_id)
        if user is None:
            # Created on first authentication; admins are promoted manually.
            logger.info("Provisioning profile for %s", session.user_id)
            user = self.users.create(
                self.gateway,
                User(id=session.user_id, nome_completo=_default_name(session), role="cliente"),
            )
        return user
