"""Member dashboard views and the permission keys that unlock them.

A view opens when the user holds ANY of the listed keys. ``dashboard`` is the
landing view and is always allowed, so it has no entry here.
"""
from __future__ import annotations
from types import MappingProxyType
from typing import Tuple

from .permissions import PermissionKey as P

DASHBOARD_VIEW = 'dashboard'

VIEW_PERMISSION_MAP = MappingProxyType({
    'stk-management': (P.MANAGE_STK,),
    'stk-events': (P.CREATE_EVENT,),
    'add-member': (P.ADD_MEMBER,),
    'create-meeting': (P.CREATE_MEETING,),
    'ballot-boxes': (P.ACCESS_BALLOT_BOXES, P.ADD_BALLOT_BOX),
    'observers': (P.ACCESS_OBSERVERS, P.ADD_OBSERVER),
    'members-page': (P.ACCESS_MEMBERS_PAGE,),
    'meetings-page': (P.ACCESS_MEETINGS_PAGE,),
    'events-page': (P.ACCESS_EVENTS_PAGE,),
    'calendar-page': (P.ACCESS_CALENDAR_PAGE,),
    'districts-page': (P.ACCESS_DISTRICTS_PAGE,),
    'archive-page': (P.ACCESS_ARCHIVE_PAGE,),
    'management-chart-page': (P.ACCESS_MANAGEMENT_CHART_PAGE,),
    'election-preparation-page': (P.ACCESS_ELECTION_PREPARATION_PAGE,),
    'representatives-page': (P.ACCESS_REPRESENTATIVES_PAGE,),
    'neighborhoods-page': (P.ACCESS_NEIGHBORHOODS_PAGE,),
    'villages-page': (P.ACCESS_VILLAGES_PAGE,),
    'groups-page': (P.ACCESS_GROUPS_PAGE,),
})

# Every sub-view the member dashboard can render
DASHBOARD_VIEWS: Tuple[str, ...] = (DASHBOARD_VIEW,) + tuple(VIEW_PERMISSION_MAP)
