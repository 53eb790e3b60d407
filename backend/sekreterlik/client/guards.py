"""Route guards.

Each guard is a pure function of an :class:`AuthSnapshot` and answers with a
:class:`GuardDecision`: render the page, show the loading placeholder, or
redirect somewhere. Guards never render an access-denied page; a user who
lacks rights silently lands on a page they do have rights to.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Callable, Optional

from sekreterlik.constants.roles import Role, HOME_PATHS, LOGIN_PATH, STK_MANAGER_POSITIONS
from .models import AuthSnapshot


class GuardOutcome(StrEnum):
    RENDER = 'render'
    LOADING = 'loading'
    REDIRECT = 'redirect'


@dataclass(frozen=True)
class GuardDecision:
    outcome: GuardOutcome
    target: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.outcome is GuardOutcome.RENDER


RENDER = GuardDecision(GuardOutcome.RENDER)
LOADING = GuardDecision(GuardOutcome.LOADING)


def redirect(path: str) -> GuardDecision:
    return GuardDecision(GuardOutcome.REDIRECT, path)


def home_path_for(role: Optional[str]) -> str:
    """Default landing path of a role; unknown roles go to the login page."""
    try:
        return HOME_PATHS[Role(role)]
    except ValueError:
        return LOGIN_PATH


def _normalize_position(position: str) -> str:
    return ' '.join(position.split()).casefold()


_STK_POSITIONS = frozenset(_normalize_position(p) for p in STK_MANAGER_POSITIONS)


def is_stk_manager_position(position: Optional[str]) -> bool:
    if not position:
        return False
    return _normalize_position(position) in _STK_POSITIONS


def _pre_check(auth: AuthSnapshot) -> Optional[GuardDecision]:
    if auth.loading:
        return LOADING
    if not auth.is_logged_in:
        return redirect(LOGIN_PATH)
    return None


def protected_route(auth: AuthSnapshot) -> GuardDecision:
    return _pre_check(auth) or RENDER


def admin_route(auth: AuthSnapshot) -> GuardDecision:
    early = _pre_check(auth)
    if early:
        return early
    if auth.role == Role.ADMIN:
        return RENDER
    # authenticated but not privileged: back to the caller's own home
    return redirect(home_path_for(auth.role))


def member_route(auth: AuthSnapshot) -> GuardDecision:
    early = _pre_check(auth)
    if early:
        return early
    if auth.role in (Role.ADMIN, Role.MEMBER):
        return RENDER
    return redirect(home_path_for(auth.role))


def stk_manager_route(auth: AuthSnapshot) -> GuardDecision:
    early = _pre_check(auth)
    if early:
        return early
    if auth.role == Role.ADMIN:
        return RENDER
    if auth.role == Role.MEMBER and is_stk_manager_position(auth.position):
        return RENDER
    return redirect(HOME_PATHS[Role.MEMBER])


def district_president_route(auth: AuthSnapshot) -> GuardDecision:
    early = _pre_check(auth)
    if early:
        return early
    if auth.role in (Role.ADMIN, Role.DISTRICT_PRESIDENT):
        return RENDER
    # unlike admin_route, mismatched roles go to the login page
    return redirect(LOGIN_PATH)


def town_president_route(auth: AuthSnapshot) -> GuardDecision:
    early = _pre_check(auth)
    if early:
        return early
    if auth.role in (Role.ADMIN, Role.TOWN_PRESIDENT):
        return RENDER
    return redirect(LOGIN_PATH)


def public_route(auth: AuthSnapshot) -> GuardDecision:
    """Inverse guard for the login page."""
    if auth.loading:
        return LOADING
    if not auth.is_logged_in:
        return RENDER
    target = home_path_for(auth.role)
    return redirect('/' if target == LOGIN_PATH else target)


Guard = Callable[[AuthSnapshot], GuardDecision]

ROUTE_GUARDS = MappingProxyType({
    'protected': protected_route,
    'admin': admin_route,
    'member': member_route,
    'stk_manager': stk_manager_route,
    'district_president': district_president_route,
    'town_president': town_president_route,
    'public': public_route,
})
