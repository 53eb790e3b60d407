from __future__ import annotations
from typing import Any, Dict, Optional, Tuple
from flask_jwt_extended import get_jwt_identity, get_jwt
from sekreterlik import get_db
from sekreterlik.models.audit import AuditLog

SYSTEM_ACTOR_ID = 0


def _current_actor() -> Tuple[int, Optional[str]]:
    """(user id, role claim) of the request's token; system actor outside a JWT context."""
    try:
        ident = get_jwt_identity()
        claims = get_jwt() or {}
    except RuntimeError:
        return SYSTEM_ACTOR_ID, None
    try:
        actor_id = int(ident) if ident is not None else SYSTEM_ACTOR_ID
    except (TypeError, ValueError):
        actor_id = SYSTEM_ACTOR_ID
    return actor_id, claims.get('role')


def add_audit(action: str, entity: Optional[str] = None, entity_id: Optional[Any] = None, meta: Optional[Dict[str, Any]] = None) -> AuditLog:
    """Stage an audit row in the current session; the caller commits.

    ``action`` is a dotted code such as ``POSITION.PERM.REPLACE`` or
    ``USER.CREATE``. Position names are stored as the entity id verbatim.
    """
    actor_id, role = _current_actor()
    log = AuditLog(
        actor_user_id=actor_id,
        actor_role=role,
        action=action,
        entity=entity,
        entity_id=None if entity_id is None else str(entity_id),
        meta=dict(meta or {}),
    )
    get_db().add(log)
    return log
