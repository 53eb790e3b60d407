"""Remote identity provider seam.

The auth provider only needs an auth-state-changed stream. Any provider
(hosted identity service, SSO bridge) is adapted to :class:`RemoteIdentityProvider`.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol


@dataclass(frozen=True)
class Principal:
    uid: str
    email: Optional[str] = None


AuthStateCallback = Callable[[Optional[Principal]], None]


class RemoteIdentityProvider(Protocol):
    def on_auth_state_changed(self, callback: AuthStateCallback) -> Callable[[], None]:
        """Subscribe; returns the unsubscribe function."""
        ...


class InMemoryIdentityProvider:
    """Process-local provider; emits the current principal on subscribe."""

    def __init__(self, principal: Optional[Principal] = None):
        self.current: Optional[Principal] = principal
        self._listeners: List[AuthStateCallback] = []

    def on_auth_state_changed(self, callback: AuthStateCallback) -> Callable[[], None]:
        self._listeners.append(callback)
        callback(self.current)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)
        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners)

    def sign_in(self, principal: Principal) -> None:
        self.current = principal
        self._emit()

    def sign_out(self) -> None:
        self.current = None
        self._emit()

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener(self.current)
