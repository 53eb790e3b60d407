from __future__ import annotations
import re
from typing import Dict, Iterable, List, Optional
from flask_jwt_extended import get_jwt
from sqlalchemy import select, delete
from sekreterlik import get_db
from sekreterlik.models.authz import User, PositionPermission
from sekreterlik.constants.roles import Role
from sekreterlik.constants.views import VIEW_PERMISSION_MAP, DASHBOARD_VIEW


def current_role() -> Optional[str]:
    return (get_jwt() or {}).get('role')


def normalize_member_password(raw: str) -> str:
    """Member passwords are phone numbers stored as digits only."""
    return re.sub(r'\D', '', raw or '')


def authenticate(username: str, password: str) -> Optional[User]:
    session = get_db()
    user = session.execute(select(User).where(User.username == username)).scalar_one_or_none()
    if not user or not user.is_active:
        return None
    if user.verify_password(password):
        return user
    if user.role != Role.ADMIN:
        normalized = normalize_member_password(password)
        if normalized and normalized != password and user.verify_password(normalized):
            return user
    return None


def all_position_permissions() -> Dict[str, List[str]]:
    session = get_db()
    rows = session.execute(select(PositionPermission).order_by(PositionPermission.id.asc())).scalars()
    mapping: Dict[str, List[str]] = {}
    for row in rows:
        mapping.setdefault(row.position, []).append(row.permission)
    return mapping


def permissions_for_position(position: Optional[str]) -> List[str]:
    if not position:
        return []
    session = get_db()
    rows = session.execute(
        select(PositionPermission)
        .where(PositionPermission.position == position)
        .order_by(PositionPermission.id.asc())
    ).scalars()
    return [r.permission for r in rows]


def replace_position_permissions(position: str, permissions: Iterable[str]) -> List[str]:
    """Replace (never merge) the permission set of a position. Caller commits."""
    session = get_db()
    # Keep first occurrence order, drop duplicates
    keys = list(dict.fromkeys(str(p) for p in permissions))
    session.execute(delete(PositionPermission).where(PositionPermission.position == position))
    for key in keys:
        session.add(PositionPermission(position=position, permission=key))
    session.flush()
    return keys


def allowed_views(granted: Iterable[str]) -> List[str]:
    """Dashboard views reachable with the given keys (policy entries only)."""
    granted_set = {str(k) for k in granted}
    views = [DASHBOARD_VIEW]
    for view, required in VIEW_PERMISSION_MAP.items():
        if granted_set.intersection(str(k) for k in required):
            views.append(view)
    return views
