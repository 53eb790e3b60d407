"""Single source of truth for grantable permission keys.

Keys are stored verbatim in ``position_permissions`` and in the client's view
map; never rename a key silently, add a new one and migrate the rows instead.
"""
from __future__ import annotations
from enum import StrEnum
from typing import Dict, List


class PermissionKey(StrEnum):
    ADD_MEMBER = 'add_member'
    CREATE_MEETING = 'create_meeting'
    CREATE_EVENT = 'create_event'
    ADD_STK = 'add_stk'
    MANAGE_STK = 'manage_stk'
    ACCESS_BALLOT_BOXES = 'access_ballot_boxes'
    ADD_BALLOT_BOX = 'add_ballot_box'
    ACCESS_OBSERVERS = 'access_observers'
    ADD_OBSERVER = 'add_observer'
    ACCESS_DASHBOARD = 'access_dashboard'
    ACCESS_MEMBERS_PAGE = 'access_members_page'
    ACCESS_MEETINGS_PAGE = 'access_meetings_page'
    ACCESS_EVENTS_PAGE = 'access_events_page'
    ACCESS_CALENDAR_PAGE = 'access_calendar_page'
    ACCESS_DISTRICTS_PAGE = 'access_districts_page'
    ACCESS_ARCHIVE_PAGE = 'access_archive_page'
    ACCESS_MANAGEMENT_CHART_PAGE = 'access_management_chart_page'
    ACCESS_ELECTION_PREPARATION_PAGE = 'access_election_preparation_page'
    ACCESS_REPRESENTATIVES_PAGE = 'access_representatives_page'
    ACCESS_NEIGHBORHOODS_PAGE = 'access_neighborhoods_page'
    ACCESS_VILLAGES_PAGE = 'access_villages_page'
    ACCESS_GROUPS_PAGE = 'access_groups_page'
    ACCESS_BULK_SMS_PAGE = 'access_bulk_sms_page'


# Display labels for the authorization settings screen
PERMISSION_LABELS: Dict[PermissionKey, str] = {
    PermissionKey.ADD_MEMBER: 'Üye Ekleme',
    PermissionKey.CREATE_MEETING: 'Toplantı Oluşturma',
    PermissionKey.CREATE_EVENT: 'Etkinlik Oluşturma',
    PermissionKey.ADD_STK: 'STK Ekleme',
    PermissionKey.MANAGE_STK: 'STK Yönetimi',
    PermissionKey.ACCESS_BALLOT_BOXES: 'Sandıklar Sayfası Erişimi',
    PermissionKey.ADD_BALLOT_BOX: 'Sandık Ekleme',
    PermissionKey.ACCESS_OBSERVERS: 'Müşahitler Sayfası Erişimi',
    PermissionKey.ADD_OBSERVER: 'Müşahit Ekleme',
    PermissionKey.ACCESS_DASHBOARD: 'Ana Sayfa Erişimi',
    PermissionKey.ACCESS_MEMBERS_PAGE: 'Üyeler Sayfası Erişimi',
    PermissionKey.ACCESS_MEETINGS_PAGE: 'Toplantılar Sayfası Erişimi',
    PermissionKey.ACCESS_EVENTS_PAGE: 'Etkinlikler Sayfası Erişimi',
    PermissionKey.ACCESS_CALENDAR_PAGE: 'Takvim Sayfası Erişimi',
    PermissionKey.ACCESS_DISTRICTS_PAGE: 'İlçeler Sayfası Erişimi',
    PermissionKey.ACCESS_ARCHIVE_PAGE: 'Arşiv Sayfası Erişimi',
    PermissionKey.ACCESS_MANAGEMENT_CHART_PAGE: 'Yönetim Şeması Sayfası Erişimi',
    PermissionKey.ACCESS_ELECTION_PREPARATION_PAGE: 'Seçim Hazırlıkları Sayfası Erişimi',
    PermissionKey.ACCESS_REPRESENTATIVES_PAGE: 'Temsilciler Sayfası Erişimi',
    PermissionKey.ACCESS_NEIGHBORHOODS_PAGE: 'Mahalleler Sayfası Erişimi',
    PermissionKey.ACCESS_VILLAGES_PAGE: 'Köyler Sayfası Erişimi',
    PermissionKey.ACCESS_GROUPS_PAGE: 'Gruplar Sayfası Erişimi',
    PermissionKey.ACCESS_BULK_SMS_PAGE: 'Toplu SMS Sayfası Erişimi',
}

AVAILABLE_PERMISSIONS: List[Dict[str, str]] = [
    {'key': key.value, 'label': PERMISSION_LABELS[key]} for key in PermissionKey
]

ALL_PERMISSION_KEYS = frozenset(key.value for key in PermissionKey)


def unknown_permission_keys(keys) -> List[str]:
    return sorted({k for k in keys if k not in ALL_PERMISSION_KEYS})


# Starting point for a fresh install; admins edit these from the settings screen
DEFAULT_POSITION_PERMISSIONS: Dict[str, List[str]] = {
    # must stay a spelling accepted by is_stk_manager_position so the STK pages open too
    'STK birim başk': [
        PermissionKey.MANAGE_STK, PermissionKey.ADD_STK, PermissionKey.CREATE_EVENT,
        PermissionKey.ACCESS_EVENTS_PAGE,
    ],
    'Seçim İşleri Başkanı': [
        PermissionKey.ACCESS_ELECTION_PREPARATION_PAGE,
        PermissionKey.ACCESS_BALLOT_BOXES, PermissionKey.ADD_BALLOT_BOX,
        PermissionKey.ACCESS_OBSERVERS, PermissionKey.ADD_OBSERVER,
        PermissionKey.ACCESS_REPRESENTATIVES_PAGE,
    ],
    'Teşkilat Başkanı': [
        PermissionKey.ADD_MEMBER, PermissionKey.CREATE_MEETING,
        PermissionKey.ACCESS_MEMBERS_PAGE, PermissionKey.ACCESS_MEETINGS_PAGE,
        PermissionKey.ACCESS_CALENDAR_PAGE, PermissionKey.ACCESS_DISTRICTS_PAGE,
        PermissionKey.ACCESS_MANAGEMENT_CHART_PAGE,
    ],
}
