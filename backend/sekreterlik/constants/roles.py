from __future__ import annotations
from enum import StrEnum
from types import MappingProxyType


class Role(StrEnum):
    ADMIN = 'admin'
    MEMBER = 'member'
    DISTRICT_PRESIDENT = 'district_president'
    TOWN_PRESIDENT = 'town_president'


VALID_ROLES = frozenset(role.value for role in Role)

LOGIN_PATH = '/login'

# Where an authenticated user lands by default
HOME_PATHS = MappingProxyType({
    Role.ADMIN: '/',
    Role.MEMBER: '/member-dashboard',
    Role.DISTRICT_PRESIDENT: '/district-president-dashboard',
    Role.TOWN_PRESIDENT: '/town-president-dashboard',
})

# Position strings are typed freely by admins, so several spellings exist
STK_MANAGER_POSITIONS = ('STK birim başk', 'Stk Birim Başk')
