from __future__ import annotations
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from sekreterlik.constants.roles import VALID_ROLES
from .errors import SessionParseError


@dataclass(frozen=True)
class SessionUser:
    """Authenticated user as handed out by the login endpoint.

    ``payload`` keeps the server's object verbatim so it can be persisted
    back exactly as received.
    """
    role: str
    username: Optional[str] = None
    id: Optional[Any] = None
    uid: Optional[str] = None
    name: Optional[str] = None
    position: Optional[str] = None
    member_id: Optional[int] = None
    town_id: Optional[int] = None
    district_id: Optional[int] = None
    payload: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_payload(cls, data: Any) -> 'SessionUser':
        if not isinstance(data, dict):
            raise SessionParseError('user snapshot must be an object')
        role = data.get('role')
        if role not in VALID_ROLES:
            raise SessionParseError(f'unknown role in user snapshot: {role!r}')
        return cls(
            role=role,
            username=data.get('username'),
            id=data.get('id'),
            uid=data.get('uid'),
            name=data.get('name'),
            position=data.get('position'),
            member_id=data.get('memberId'),
            town_id=data.get('townId'),
            district_id=data.get('districtId'),
            payload=dict(data),
        )

    @classmethod
    def from_json(cls, raw: str) -> 'SessionUser':
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as exc:
            raise SessionParseError('user snapshot is not valid JSON') from exc
        return cls.from_payload(data)

    def to_json(self) -> str:
        return json.dumps(self.payload, ensure_ascii=False)

    def matches_principal(self, uid: Any) -> bool:
        if uid is None:
            return False
        return str(uid) in {str(v) for v in (self.id, self.uid) if v is not None}


@dataclass(frozen=True)
class AuthSnapshot:
    """What route guards see: ``(is_logged_in, loading, user)``."""
    is_logged_in: bool = False
    loading: bool = False
    user: Optional[SessionUser] = None

    @property
    def role(self) -> Optional[str]:
        return self.user.role if self.user else None

    @property
    def position(self) -> Optional[str]:
        return self.user.position if self.user else None
