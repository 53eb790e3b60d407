"""Page endpoints behind the route guards.

The guard decision maps to HTTP: render → 200 ``{'page': name}``, redirect →
302 to the target path. Pages read the bearer token when one is sent; a
missing or unusable token means an anonymous visitor.
"""
from functools import wraps
from flask import Blueprint, redirect, current_app
from flask_jwt_extended import verify_jwt_in_request, get_jwt, get_jwt_identity
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from sekreterlik.client.errors import SessionParseError
from sekreterlik.client.guards import (
    GuardOutcome,
    admin_route,
    member_route,
    stk_manager_route,
    district_president_route,
    town_president_route,
    public_route,
)
from sekreterlik.client.models import AuthSnapshot, SessionUser

pages_bp = Blueprint('pages', __name__)


def request_auth_snapshot() -> AuthSnapshot:
    try:
        verify_jwt_in_request(optional=True)
    except (JWTExtendedException, PyJWTError) as e:
        current_app.logger.info('Ignoring unusable token on page request: %s', e)
        return AuthSnapshot()
    identity = get_jwt_identity()
    if identity is None:
        return AuthSnapshot()
    claims = get_jwt()
    try:
        user = SessionUser.from_payload({'id': identity, 'role': claims.get('role'), 'position': claims.get('position')})
    except SessionParseError:
        return AuthSnapshot()
    return AuthSnapshot(is_logged_in=True, loading=False, user=user)


def guarded(guard):
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            decision = guard(request_auth_snapshot())
            if decision.outcome is GuardOutcome.REDIRECT:
                return redirect(decision.target)
            return fn(*args, **kwargs)
        return wrapper
    return outer


@pages_bp.get('/')
@guarded(admin_route)
def admin_dashboard():
    return {'page': 'dashboard'}


@pages_bp.get('/settings/authorization')
@guarded(admin_route)
def authorization_settings():
    return {'page': 'authorization-settings'}


@pages_bp.get('/member-dashboard')
@guarded(member_route)
def member_dashboard():
    return {'page': 'member-dashboard'}


@pages_bp.get('/stk-management')
@guarded(stk_manager_route)
def stk_management():
    return {'page': 'stk-management'}


@pages_bp.get('/stk-events')
@guarded(stk_manager_route)
def stk_events():
    return {'page': 'stk-events'}


@pages_bp.get('/district-president-dashboard')
@guarded(district_president_route)
def district_president_dashboard():
    return {'page': 'district-president-dashboard'}


@pages_bp.get('/town-president-dashboard')
@guarded(town_president_route)
def town_president_dashboard():
    return {'page': 'town-president-dashboard'}


@pages_bp.get('/login')
@guarded(public_route)
def login_page():
    return {'page': 'login'}
