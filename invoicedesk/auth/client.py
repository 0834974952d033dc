from collections.abc import Callable
from typing import Any

import httpx
from supabase import AuthError as SupabaseAuthError
from supabase import Client, create_client

from invoicedesk.auth.exceptions import AuthError
from invoicedesk.auth.models import AuthSession, SessionEvent
from invoicedesk.config.settings import Settings
from invoicedesk.logging.logger import Log

SessionListener = Callable[[SessionEvent, AuthSession | None], None]


class SupabaseAuthClient:
    """Email/password auth through the Supabase client.

    Session storage and token refresh are left to ``supabase``; this class
    converts its sessions and errors into invoicedesk types.
    """

    def __init__(self, settings: Settings, client: Client | None = None) -> None:
        if client is None:
            if not settings.supabase_url:
                raise ValueError("supabase_url is required for authentication")
            client = create_client(settings.supabase_url, settings.supabase_anon_key)
        self._client = client

    def get_current_session(self) -> AuthSession | None:
        """Current session; an expired one is refreshed by the client first."""
        try:
            session = self._client.auth.get_session()
        except (SupabaseAuthError, httpx.HTTPError) as exc:
            Log.warning(f"Session refresh failed, treating as signed out: {exc}")
            return None
        return AuthSession.from_supabase(session) if session is not None else None

    def sign_in(self, email: str, password: str) -> AuthSession:
        response = self._call(
            self._client.auth.sign_in_with_password,
            {"email": email, "password": password},
        )
        if response.session is None:
            raise AuthError("Sign-in did not return a session")
        session = AuthSession.from_supabase(response.session)
        Log.info(f"Signed in as {session.email}")
        return session

    def sign_up(self, email: str, password: str) -> AuthSession | None:
        """Register a user.

        Returns None while the confirmation email is pending; a session only
        when the project signs new users in immediately.
        """
        response = self._call(
            self._client.auth.sign_up,
            {"email": email, "password": password},
        )
        if response.session is None:
            Log.info(f"Sign-up for {email} awaiting email confirmation")
            return None
        return AuthSession.from_supabase(response.session)

    def sign_out(self) -> None:
        self._call(self._client.auth.sign_out)
        Log.info("Signed out")

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""

        def relay(event: Any, session: Any) -> None:
            callback(event, AuthSession.from_supabase(session) if session is not None else None)

        subscription = self._client.auth.on_auth_state_change(relay)
        return subscription.unsubscribe

    @staticmethod
    def _call(operation: Callable[..., Any], *args: Any) -> Any:
        try:
            return operation(*args)
        except SupabaseAuthError as exc:
            raise AuthError(str(exc)) from exc
        except httpx.HTTPError as exc:
            raise AuthError(f"Authentication service unreachable: {exc}") from exc
