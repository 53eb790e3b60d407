"""Session reconciliation as an explicit state machine.

States::

    UNKNOWN --LocalSnapshotLoaded / RemotePrincipalChanged--> AUTHENTICATED | ANONYMOUS
    any     --login()--> AUTHENTICATING --> AUTHENTICATED | previous state
    any     --logout()--> ANONYMOUS

In local mode the persisted snapshot alone decides. In remote mode the
snapshot is only trusted once the identity provider reports a principal with
the same identifier; every principal event re-reads the store, so the order
in which the store and the provider become ready does not matter.

The bearer token is persisted with the snapshot and handed back to the
ApiService whenever a session is adopted; every ANONYMOUS state drops it.

Every failure path ends in ``ANONYMOUS``; nothing here raises to callers.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from sekreterlik.config import settings
from .api_service import ApiService
from .errors import ApiError, SessionParseError
from .identity import Principal, RemoteIdentityProvider
from .models import AuthSnapshot, SessionUser
from .session_store import SessionStore

logger = logging.getLogger(__name__)

LOGIN_FAILED = 'Giriş başarısız'
LOGIN_ERROR = 'Giriş sırasında bir hata oluştu'


class AuthState(Enum):
    UNKNOWN = 'unknown'
    AUTHENTICATING = 'authenticating'
    AUTHENTICATED = 'authenticated'
    ANONYMOUS = 'anonymous'


@dataclass(frozen=True)
class LocalSnapshotLoaded:
    raw_user: Optional[str]
    raw_flag: Optional[str]


@dataclass(frozen=True)
class RemotePrincipalChanged:
    principal: Optional[Principal]


Listener = Callable[[AuthSnapshot], None]


class AuthProvider:
    def __init__(
        self,
        api: ApiService,
        store: SessionStore,
        identity_provider: Optional[RemoteIdentityProvider] = None,
        use_remote_identity: bool = settings.USE_REMOTE_IDENTITY,
    ):
        self.api = api
        self.store = store
        self.identity_provider = identity_provider
        self.use_remote_identity = use_remote_identity
        self.state = AuthState.UNKNOWN
        self.user: Optional[SessionUser] = None
        self.error: Optional[str] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._listeners: List[Listener] = []

    # --- read side ---

    @property
    def is_logged_in(self) -> bool:
        # a re-login keeps the previous session until the attempt resolves
        if self.state is AuthState.AUTHENTICATING:
            return self.user is not None
        return self.state is AuthState.AUTHENTICATED

    @property
    def loading(self) -> bool:
        return self.state in (AuthState.UNKNOWN, AuthState.AUTHENTICATING)

    def snapshot(self) -> AuthSnapshot:
        return AuthSnapshot(is_logged_in=self.is_logged_in, loading=self.loading, user=self.user)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    # --- lifecycle ---

    def mount(self) -> None:
        # a re-mount replaces any earlier provider subscription
        self.teardown()
        self._transition(AuthState.UNKNOWN, None)
        if not self.use_remote_identity:
            raw_user, raw_flag = self.store.read()
            self.dispatch(LocalSnapshotLoaded(raw_user, raw_flag))
            return
        if self.identity_provider is None:
            logger.warning('Remote identity enabled but no identity provider configured')
            self._transition(AuthState.ANONYMOUS, None)
            return
        try:
            self._unsubscribe = self.identity_provider.on_auth_state_changed(
                lambda principal: self.dispatch(RemotePrincipalChanged(principal))
            )
        except Exception:
            # no retry; the user reloads or logs in again
            logger.exception('Identity provider initialization failed')
            self._transition(AuthState.ANONYMOUS, None)

    def teardown(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # --- events ---

    def dispatch(self, event) -> None:
        if isinstance(event, LocalSnapshotLoaded):
            self._on_local_snapshot(event)
        elif isinstance(event, RemotePrincipalChanged):
            self._on_remote_principal(event)
        else:
            raise TypeError(f'unknown auth event: {event!r}')

    def _on_local_snapshot(self, event: LocalSnapshotLoaded) -> None:
        if not event.raw_user or event.raw_flag != 'true':
            self._transition(AuthState.ANONYMOUS, None)
            return
        try:
            user = SessionUser.from_json(event.raw_user)
        except SessionParseError as exc:
            logger.error('Error parsing saved user data: %s', exc)
            self._purge()
            self._transition(AuthState.ANONYMOUS, None)
            return
        self._adopt(user)

    def _on_remote_principal(self, event: RemotePrincipalChanged) -> None:
        principal = event.principal
        if principal is None:
            self._purge()
            self._transition(AuthState.ANONYMOUS, None)
            return
        raw_user, _ = self.store.read()
        if not raw_user:
            self._transition(AuthState.ANONYMOUS, None)
            return
        try:
            user = SessionUser.from_json(raw_user)
        except SessionParseError as exc:
            logger.error('Error parsing saved user data: %s', exc)
            self._purge()
            self._transition(AuthState.ANONYMOUS, None)
            return
        if not user.matches_principal(principal.uid):
            logger.info('Stored session does not belong to principal %s; clearing it', principal.uid)
            self._purge()
            self._transition(AuthState.ANONYMOUS, None)
            return
        self._adopt(user)

    # --- commands ---

    def login(self, username: str, password: str) -> bool:
        previous_state, previous_user = self.state, self.user
        previous_token = self.api.token
        self.error = None
        self._transition(AuthState.AUTHENTICATING, previous_user)
        try:
            response = self.api.login(username, password)
            if response.get('success') is True:
                user = SessionUser.from_payload(response.get('user'))
                self.store.save(user.payload, self.api.token)
                self._transition(AuthState.AUTHENTICATED, user)
                return True
            self.error = response.get('message') or LOGIN_FAILED
        except (ApiError, SessionParseError) as exc:
            logger.warning('Login request failed: %s', exc)
            self.error = LOGIN_ERROR
        # a failed attempt leaves any earlier session as it was
        if previous_state in (AuthState.UNKNOWN, AuthState.AUTHENTICATING):
            previous_state = AuthState.ANONYMOUS
        # ApiService.login may already hold the rejected attempt's token
        self.api.token = previous_token
        self._transition(previous_state, previous_user)
        return False

    def logout(self) -> None:
        """Local only: purges storage and forgets the bearer token."""
        self.error = None
        self._purge()
        self._transition(AuthState.ANONYMOUS, None)

    # --- internals ---

    def _adopt(self, user: SessionUser) -> None:
        self.api.token = self.store.read_token()
        self._transition(AuthState.AUTHENTICATED, user)

    def _purge(self) -> None:
        self.store.purge()

    def _transition(self, state: AuthState, user: Optional[SessionUser]) -> None:
        self.state = state
        if state is AuthState.ANONYMOUS:
            self.api.token = None
        self.user = user if state in (AuthState.AUTHENTICATED, AuthState.AUTHENTICATING) else None
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)
