"""Audit logging decorator for mutating route handlers.

Usage:

@audit_log('USER.CREATE', entity='User', entity_id_key='id', meta_keys=['username', 'role'])
def create_member_user():
    ... return {'id': user.id, ...}, 201

@audit_log('POSITION.PERM.REPLACE', entity='Position', entity_id_arg='position',
           diff_keys=['permissions'], pre_fetch=lambda a, kw: {...})
def set_position_permissions(position): ...

Only successful responses (status < 400) are audited. The handler's return
value (dict, (dict, status) or (dict, status, headers)) is passed through
unchanged; the audit row is committed right after the handler returns.
"""
from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Iterable, Optional, Dict

from flask import current_app

from sekreterlik.services.audit import add_audit
from sekreterlik import get_db


def _split_return(rv: Any):
    """Return (payload, status) from a Flask view return value."""
    if isinstance(rv, tuple) and rv:
        status = rv[1] if len(rv) > 1 and isinstance(rv[1], int) else 200
        return rv[0], status
    return rv, 200


def audit_log(
    action: str,
    *,
    entity: Optional[str] = None,
    entity_id_key: Optional[str] = None,
    entity_id_arg: Optional[str] = None,
    meta_keys: Optional[Iterable[str]] = None,
    diff_keys: Optional[Iterable[str]] = None,
    pre_fetch: Optional[Callable[[tuple, dict], Dict[str, Any]]] = None,
):
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            before = pre_fetch(args, kwargs) if (diff_keys and pre_fetch) else None
            rv = fn(*args, **kwargs)
            data, status = _split_return(rv)
            if status >= 400 or not isinstance(data, dict):
                return rv
            entity_id = None
            if entity_id_key and entity_id_key in data:
                entity_id = data.get(entity_id_key)
            elif entity_id_arg and entity_id_arg in kwargs:
                entity_id = kwargs.get(entity_id_arg)
            meta = {k: data.get(k) for k in (meta_keys or ()) if k in data}
            if diff_keys and isinstance(before, dict):
                changes = {
                    k: {'before': before.get(k), 'after': data.get(k)}
                    for k in diff_keys
                    if k in before and k in data and before.get(k) != data.get(k)
                }
                if changes:
                    meta['changes'] = changes
            add_audit(action, entity, entity_id, meta)
            session = get_db()
            try:
                session.commit()
            except Exception:
                # the main change is already committed; a lost audit row must not turn it into a 500
                session.rollback()
                current_app.logger.exception('Audit commit failed for %s', action)
            return rv
        return wrapper
    return outer
