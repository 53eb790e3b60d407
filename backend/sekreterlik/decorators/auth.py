from functools import wraps
from flask import abort
from flask_jwt_extended import verify_jwt_in_request
from sekreterlik.constants.roles import Role, VALID_ROLES
from sekreterlik.services.policy import current_role


def require_roles(*roles: str):
    unknown = [r for r in roles if r not in VALID_ROLES]
    if unknown:
        # fail at import time instead of silently denying everyone
        raise ValueError(f'Unknown roles: {unknown}')

    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            if current_role() not in roles:
                abort(403, description='Admin yetkisi gerekli' if roles == (Role.ADMIN,) else 'Yetkisiz erişim')
            return fn(*args, **kwargs)
        return wrapper
    return outer


def require_admin(fn):
    return require_roles(Role.ADMIN)(fn)
