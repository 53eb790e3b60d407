from urllib.parse import quote
from sekreterlik import get_db
from sekreterlik.models.audit import AuditLog
from sekreterlik.constants.permissions import PermissionKey, AVAILABLE_PERMISSIONS
from test_utils_seed import ensure_user, ensure_position_permissions, auth_headers


def _admin(client, username='pa_admin'):
    ensure_user(username, role='admin')
    return auth_headers(client, username)


def test_set_replaces_whole_set(client):
    headers = _admin(client)
    pos = 'PA Replace'
    first = client.post(f'/permissions/{quote(pos)}', json={'permissions': ['manage_stk', 'create_event']}, headers=headers)
    assert first.status_code == 200, first.get_json()
    assert first.get_json() == {'success': True, 'position': pos, 'permissions': ['manage_stk', 'create_event']}

    second = client.post(f'/permissions/{quote(pos)}', json={'permissions': ['add_member']}, headers=headers)
    assert second.status_code == 200
    got = client.get(f'/permissions/{quote(pos)}', headers=headers)
    assert got.get_json() == ['add_member']


def test_set_drops_duplicates_keeping_order(client):
    headers = _admin(client)
    resp = client.post('/permissions/PA%20Dup', json={'permissions': ['add_stk', 'manage_stk', 'add_stk']}, headers=headers)
    assert resp.get_json()['permissions'] == ['add_stk', 'manage_stk']


def test_empty_list_clears_position(client):
    headers = _admin(client)
    ensure_position_permissions('PA Empty', ['add_member'])
    resp = client.post('/permissions/PA%20Empty', json={'permissions': []}, headers=headers)
    assert resp.status_code == 200
    assert client.get('/permissions/PA%20Empty', headers=headers).get_json() == []


def test_unknown_keys_rejected_in_strict_mode(client, app_instance, monkeypatch):
    monkeypatch.setitem(app_instance.config, 'STRICT_PERMISSION_KEYS', True)
    headers = _admin(client)
    resp = client.post('/permissions/PA%20Strict', json={'permissions': ['manage_stk', 'fly_rocket']}, headers=headers)
    assert resp.status_code == 400
    assert 'fly_rocket' in resp.get_json()['error']['detail']
    # nothing written
    assert client.get('/permissions/PA%20Strict', headers=headers).get_json() == []


def test_arbitrary_keys_round_trip_by_default(client, app_instance):
    assert app_instance.config['STRICT_PERMISSION_KEYS'] is False
    headers = _admin(client)
    resp = client.post('/permissions/PA%20Loose', json={'permissions': ['a', 'b']}, headers=headers)
    assert resp.status_code == 200
    assert client.get('/permissions/PA%20Loose', headers=headers).get_json() == ['a', 'b']


def test_permissions_must_be_string_list(client):
    headers = _admin(client)
    for bad in ({'permissions': 'manage_stk'}, {'permissions': [1, 2]}, {}):
        resp = client.post('/permissions/PA%20Bad', json=bad, headers=headers)
        assert resp.status_code == 400
        assert resp.get_json()['error']['detail'] == 'permissions dizi olmalı'


def test_members_can_read_but_not_write(client):
    ensure_user('pa_member', position='PA Read')
    ensure_position_permissions('PA Read', [PermissionKey.ACCESS_CALENDAR_PAGE])
    headers = auth_headers(client, 'pa_member')
    assert client.get('/permissions/PA%20Read', headers=headers).get_json() == ['access_calendar_page']
    denied = client.post('/permissions/PA%20Read', json={'permissions': []}, headers=headers)
    assert denied.status_code == 403
    assert client.delete('/permissions/PA%20Read', headers=headers).status_code == 403
    # unchanged
    assert client.get('/permissions/PA%20Read', headers=headers).get_json() == ['access_calendar_page']


def test_reads_require_token(client):
    assert client.get('/permissions').status_code == 401
    assert client.get('/permissions/PA%20Read').status_code == 401


def test_unknown_position_is_empty(client):
    headers = _admin(client)
    assert client.get('/permissions/Never%20Configured', headers=headers).get_json() == []


def test_position_with_slash_and_turkish_characters(client):
    headers = _admin(client)
    pos = 'İlçe Başkanı / Yardımcı'
    url = f'/permissions/{quote(pos, safe="")}'
    resp = client.post(url, json={'permissions': ['add_member']}, headers=headers)
    assert resp.status_code == 200, resp.get_json()
    assert resp.get_json()['position'] == pos
    assert client.get(url, headers=headers).get_json() == ['add_member']
    assert client.get('/permissions', headers=headers).get_json()[pos] == ['add_member']


def test_list_all_groups_by_position(client):
    headers = _admin(client)
    ensure_position_permissions('PA All One', ['add_member', 'create_meeting'])
    ensure_position_permissions('PA All Two', ['manage_stk'])
    mapping = client.get('/permissions', headers=headers).get_json()
    assert mapping['PA All One'] == ['add_member', 'create_meeting']
    assert mapping['PA All Two'] == ['manage_stk']
    assert 'PA Never' not in mapping


def test_delete_clears_and_is_audited(client):
    headers = _admin(client)
    ensure_position_permissions('PA Delete', ['add_observer'])
    resp = client.delete('/permissions/PA%20Delete', headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()['permissions'] == []
    assert client.get('/permissions/PA%20Delete', headers=headers).get_json() == []
    row = get_db().query(AuditLog).filter_by(action='POSITION.PERM.CLEAR', entity_id='PA Delete').one()
    assert row.meta['changes']['permissions'] == {'before': ['add_observer'], 'after': []}


def test_replace_is_audited_with_diff(client):
    headers = _admin(client, 'pa_auditor')
    ensure_position_permissions('PA Audit', ['add_member'])
    client.post('/permissions/PA%20Audit', json={'permissions': ['create_meeting']}, headers=headers)
    row = get_db().query(AuditLog).filter_by(action='POSITION.PERM.REPLACE', entity_id='PA Audit').one()
    assert row.entity == 'Position'
    assert row.actor_role == 'admin'
    assert row.meta['changes']['permissions']['before'] == ['add_member']
    assert row.meta['changes']['permissions']['after'] == ['create_meeting']


def test_catalog_lists_every_key(client):
    ensure_user('pa_catalog')
    headers = auth_headers(client, 'pa_catalog')
    resp = client.get('/permission-catalog', headers=headers)
    assert resp.status_code == 200
    catalog = resp.get_json()
    assert catalog == [dict(item) for item in AVAILABLE_PERMISSIONS]
    assert {c['key'] for c in catalog} == {k.value for k in PermissionKey}
    assert all(c['label'] for c in catalog)
