"""In-page permission gate for the member dashboard sub-views.

The dashboard swaps sub-views in place instead of navigating, so switching
goes through :meth:`ViewGate.set_view_with_permission` and every render goes
through :meth:`ViewGate.resolve_view`, which re-checks the current view
against the permissions held *now*.

Policy:

* ``dashboard`` is always allowed.
* A view listed in ``VIEW_PERMISSION_MAP`` opens when ANY of its keys is
  granted (exact string match, no hierarchy).
* A view with no entry is allowed while ``fail_open`` is on (logged), and
  denied otherwise.
"""
from __future__ import annotations
import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Mapping, Optional, Sequence

from sekreterlik.config import settings
from sekreterlik.constants.views import DASHBOARD_VIEW, VIEW_PERMISSION_MAP
from .models import SessionUser
from .registry import PermissionRegistryClient

logger = logging.getLogger(__name__)

NO_PERMISSION_MESSAGE = 'Bu sayfaya erişim yetkiniz bulunmamaktadır'


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ViewGate:
    def __init__(
        self,
        granted_permissions: Iterable[str] = (),
        *,
        view_map: Mapping[str, Sequence[str]] = VIEW_PERMISSION_MAP,
        fail_open: bool = settings.VIEW_GATE_FAIL_OPEN,
        error_ttl: float = settings.VIEW_ERROR_TTL_SECONDS,
    ):
        self.view_map = view_map
        self.fail_open = fail_open
        self.error_ttl = timedelta(seconds=error_ttl)
        self.current_view = DASHBOARD_VIEW
        self._granted = frozenset(str(p) for p in granted_permissions)
        self._error: Optional[str] = None
        self._error_until: Optional[datetime] = None

    @classmethod
    def for_user(cls, registry: PermissionRegistryClient, user: Optional[SessionUser], **kwargs) -> 'ViewGate':
        """Gate seeded with the permissions of the user's position (empty on failure)."""
        position = user.position if user else None
        return cls(registry.get_permissions_for_position(position), **kwargs)

    @property
    def granted_permissions(self) -> frozenset:
        return self._granted

    def update_permissions(self, granted_permissions: Iterable[str]) -> None:
        self._granted = frozenset(str(p) for p in granted_permissions)

    @property
    def error(self) -> str:
        if self._error and self._error_until is not None and _now() >= self._error_until:
            self._error = None
            self._error_until = None
        return self._error or ''

    def _flash(self, message: str) -> None:
        self._error = message
        self._error_until = _now() + self.error_ttl

    def has_view_permission(self, view: str) -> bool:
        if view == DASHBOARD_VIEW:
            return True
        required = self.view_map.get(view)
        if required is None:
            logger.warning('No permission policy for view %r; allowed=%s', view, self.fail_open)
            return self.fail_open
        return any(str(key) in self._granted for key in required)

    def set_view_with_permission(self, view: str) -> bool:
        if self.has_view_permission(view):
            self.current_view = view
            return True
        self.current_view = DASHBOARD_VIEW
        self._flash(NO_PERMISSION_MESSAGE)
        return False

    def resolve_view(self) -> str:
        """View to render right now; drops back to dashboard if access was lost."""
        if self.current_view != DASHBOARD_VIEW and not self.has_view_permission(self.current_view):
            logger.info('View %r no longer permitted; falling back to dashboard', self.current_view)
            self.current_view = DASHBOARD_VIEW
        return self.current_view

    def allowed_views(self) -> List[str]:
        return [DASHBOARD_VIEW] + [v for v in self.view_map if self.has_view_permission(v)]
